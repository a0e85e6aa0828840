"""
Display module for Memo.

Plain-text rendering of memos for the terminal.
"""

import os
import sys
from typing import Any, Iterable

from memo.db import Memo


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    YELLOW = "\033[33m"
    BRIGHT_CYAN = "\033[96m"

    @classmethod
    def enabled(cls, color: bool = True) -> bool:
        """Check if colors should be enabled."""
        # color comes from [display] color in config.toml
        # Disable if NO_COLOR is set or not a tty
        if not color or os.environ.get("NO_COLOR"):
            return False
        return sys.stdout.isatty()


def c(text: str, *codes: str, color: bool = True) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled(color):
        return text
    return "".join(codes) + text + Colors.RESET


def format_memo(memo: Memo, show_time: bool = False, color: bool = True) -> str:
    """Render one memo as "<id>: <content>"."""
    memo_id = c(str(memo.id), Colors.BOLD, Colors.BRIGHT_CYAN, color=color)
    line = f"{memo_id}: {memo.content}"
    if show_time:
        when = memo.created_at.strftime("%Y-%m-%d %H:%M:%S %z")
        line += " " + c(f"[{when}]", Colors.DIM, color=color)
    return line


def format_memos(
    memos: Iterable[Memo],
    show_time: bool = False,
    empty_message: str = "No memos found.",
    color: bool = True,
) -> str:
    """Render memos one per line, in the order given."""
    lines = [format_memo(memo, show_time=show_time, color=color) for memo in memos]
    if not lines:
        return c(empty_message, Colors.DIM, color=color)
    return "\n".join(lines)


def format_stats(stats: dict[str, Any], color: bool = True) -> str:
    """Format store statistics."""
    lines = ["Memo Statistics", "-" * 30]
    lines.append(f"Total memos: {stats['total_memos']}")

    if stats.get("unreadable"):
        lines.append(c(f"Unreadable: {stats['unreadable']}", Colors.YELLOW, color=color))

    for label, key in (("Oldest", "oldest"), ("Newest", "newest")):
        value = stats.get(key)
        if value is not None:
            lines.append(f"{label}: {value.isoformat(sep=' ', timespec='seconds')}")

    lines.append(f"\nDatabase: {stats['db_path']}")
    return "\n".join(lines)
