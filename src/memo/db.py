"""
Database module for Memo.

SQLite storage for memos: one table, one row per memo.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, Field
from pydantic import ValidationError as RecordError

from memo import timestamps
from memo.errors import (
    CorruptRecordsError,
    StorageInitError,
    StorageIOError,
    StorageReadError,
    StorageWriteError,
    TimestampDecodeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS memo (
    id          INTEGER PRIMARY KEY,
    content     TEXT,
    created_at  TEXT NOT NULL               -- RFC 3339 with local offset
)
"""

LIKE_ESCAPE = "\\"

# SQLite INTEGER is a signed 64-bit value
ROWID_MIN = -(2 ** 63)
ROWID_MAX = 2 ** 63 - 1


class Memo(BaseModel):
    """A single stored memo."""

    id: int = Field(description="Engine-assigned row id")
    content: str = Field(description="Memo text")
    created_at: datetime = Field(description="Creation time with the writer's UTC offset")


def _like_pattern(keyword: str) -> str:
    """Build a LIKE pattern that matches keyword as a literal substring."""
    escaped = (
        keyword.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _require_utf8(text: str, what: str) -> None:
    """Reject text SQLite can't store, e.g. surrogate-escaped argv bytes."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(f"{what} is not valid UTF-8") from e


def _is_rowid(memo_id: int) -> bool:
    return ROWID_MIN <= memo_id <= ROWID_MAX


class MemoStore:
    """SQLite-backed memo store."""

    def __init__(self, db_path: Path, strict: bool = False):
        self.db_path = Path(db_path)
        self.strict = strict
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Ensure the directory and schema exist. Safe to call repeatedly."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                f"Cannot create directory {self.db_path.parent}: {e}"
            ) from e

        try:
            with self._connect() as conn:
                conn.execute(SCHEMA)
        except sqlite3.Error as e:
            raise StorageInitError(f"Cannot initialise {self.db_path}: {e}") from e

        logger.debug("Store ready at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _decode_rows(
        self, rows: list[sqlite3.Row], strict: bool | None = None
    ) -> list[Memo]:
        """
        Turn rows into Memo records.

        Rows whose timestamp or content can't be decoded are dropped with
        a warning, or reported all at once via CorruptRecordsError in strict
        mode.
        """
        memos: list[Memo] = []
        skipped: list[int] = []

        for row in rows:
            try:
                created_at = timestamps.decode(row["created_at"])
            except TimestampDecodeError as e:
                logger.warning("Skipping memo %s: %s", row["id"], e)
                skipped.append(row["id"])
                continue

            try:
                memo = Memo(
                    id=row["id"],
                    content=row["content"] or "",
                    created_at=created_at,
                )
            except RecordError as e:
                logger.warning(
                    "Skipping memo %s: unreadable content (%s)",
                    row["id"], e.errors()[0]["msg"],
                )
                skipped.append(row["id"])
                continue

            memos.append(memo)

        if strict is None:
            strict = self.strict
        if skipped and strict:
            raise CorruptRecordsError(memos, skipped)

        return memos

    def add(self, content: str) -> int:
        """Insert a new memo stamped with the local time. Returns its id."""
        if not content or not content.strip():
            raise ValidationError("empty content")
        _require_utf8(content, "content")

        created_at = timestamps.encode(timestamps.now_local())

        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "INSERT INTO memo (content, created_at) VALUES (?, ?)",
                    (content, created_at),
                )
                memo_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StorageWriteError(f"Cannot add memo: {e}") from e

        logger.debug("Added memo %s", memo_id)
        return memo_id

    def list_all(self) -> list[Memo]:
        """All memos in insertion order."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT id, content, created_at FROM memo ORDER BY id"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageReadError(f"Cannot list memos: {e}") from e

        return self._decode_rows(rows)

    def get(self, memo_id: int) -> Memo | None:
        """Get a single memo by id."""
        if not _is_rowid(memo_id):
            return None

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT id, content, created_at FROM memo WHERE id = ?",
                    (memo_id,),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageReadError(f"Cannot read memo {memo_id}: {e}") from e

        if row is None:
            return None
        memos = self._decode_rows([row])
        return memos[0] if memos else None

    def delete(self, memo_id: int) -> bool:
        """Delete a memo. Returns False if there was nothing to delete."""
        # Out of INTEGER range, so no such row can exist
        if not _is_rowid(memo_id):
            return False

        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM memo WHERE id = ?", (memo_id,))
                deleted = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageWriteError(f"Cannot delete memo {memo_id}: {e}") from e

        logger.debug("Delete memo %s: %s", memo_id, "removed" if deleted else "not found")
        return deleted

    def find(self, keyword: str) -> list[Memo]:
        """
        Memos whose content contains keyword, in insertion order.

        Matching follows SQLite LIKE: case-insensitive for ASCII letters.
        An empty keyword matches everything.
        """
        _require_utf8(keyword, "keyword")

        try:
            with self._connect() as conn:
                rows = conn.execute(
                    """
                    SELECT id, content, created_at FROM memo
                    WHERE COALESCE(content, '') LIKE ? ESCAPE ?
                    ORDER BY id
                    """,
                    (_like_pattern(keyword), LIKE_ESCAPE),
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageReadError(f"Cannot search memos: {e}") from e

        return self._decode_rows(rows)

    def get_stats(self) -> dict[str, Any]:
        """Get database statistics."""
        try:
            with self._connect() as conn:
                total = conn.execute("SELECT COUNT(*) FROM memo").fetchone()[0]
                rows = conn.execute(
                    "SELECT id, content, created_at FROM memo ORDER BY id"
                ).fetchall()
        except sqlite3.Error as e:
            raise StorageReadError(f"Cannot read stats: {e}") from e

        # Stats are informational; never strict
        memos = self._decode_rows(rows, strict=False)

        return {
            "total_memos": total,
            "unreadable": total - len(memos),
            "oldest": memos[0].created_at if memos else None,
            "newest": memos[-1].created_at if memos else None,
            "db_path": str(self.db_path),
        }
