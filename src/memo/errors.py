"""
Error types for Memo.

Every failure the store can report is one of these. The CLI turns them
into a message on stderr and a non-zero exit code.
"""

from typing import Any


class MemoError(Exception):
    """Base class for all memo errors."""


class ValidationError(MemoError, ValueError):
    """Input rejected before touching storage."""


class StorageIOError(MemoError, OSError):
    """The storage directory could not be created."""


class StorageInitError(MemoError):
    """The database could not be opened or its schema created."""


class StorageReadError(MemoError):
    """A query against the database failed."""


class StorageWriteError(MemoError):
    """An insert or delete failed."""


class TimestampDecodeError(MemoError, ValueError):
    """A stored timestamp does not match the expected format."""


class ConfigError(MemoError):
    """The config file could not be parsed."""


class CorruptRecordsError(StorageReadError):
    """
    Raised by strict reads when some rows could not be decoded.

    Carries what was readable so the caller can still show it.
    """

    def __init__(self, memos: list[Any], skipped_ids: list[int]):
        self.memos = memos
        self.skipped_ids = skipped_ids
        ids = ", ".join(str(i) for i in skipped_ids)
        super().__init__(f"{len(skipped_ids)} unreadable record(s): {ids}")
