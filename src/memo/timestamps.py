"""
Timestamp codec for Memo.

Creation times are stored as RFC 3339 text with the writer's UTC offset,
e.g. 2024-05-01T09:30:12.250000+09:00. Decoding rebuilds the same instant
with the same fixed offset, whatever timezone the reader runs in.
"""

import re
from datetime import datetime, timedelta, timezone

from memo.errors import TimestampDecodeError

_RFC3339 = re.compile(
    r"""
    ^(?P<date>\d{4}-\d{2}-\d{2})
    [Tt\ ]
    (?P<time>\d{2}:\d{2}:\d{2})
    (?:\.(?P<frac>\d{1,9}))?
    (?P<offset>[Zz]|[+-]\d{2}:\d{2}(?::\d{2})?)$
    """,
    re.VERBOSE,
)


def now_local() -> datetime:
    """Current instant carrying the local UTC offset."""
    return datetime.now().astimezone()


def encode(instant: datetime) -> str:
    """
    Encode an instant as RFC 3339 text.

    Naive datetimes are taken to be local time.
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        instant = instant.astimezone()
    return instant.isoformat()


def _parse_offset(text: str) -> timezone:
    if text in ("Z", "z"):
        return timezone.utc

    sign = -1 if text[0] == "-" else 1
    parts = [int(p) for p in text[1:].split(":")]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) > 2 else 0
    if minutes > 59 or seconds > 59:
        raise ValueError(f"offset out of range: {text}")

    return timezone(sign * timedelta(hours=hours, minutes=minutes, seconds=seconds))


def decode(text: str) -> datetime:
    """
    Decode RFC 3339 text back into an aware datetime.

    Accepts up to nine fractional digits (anything past microseconds is
    truncated). Raises TimestampDecodeError on anything else.
    """
    if not isinstance(text, str):
        raise TimestampDecodeError(f"Not a timestamp string: {text!r}")

    match = _RFC3339.match(text.strip())
    if not match:
        raise TimestampDecodeError(f"Unrecognised timestamp: {text!r}")

    frac = (match["frac"] or "").ljust(6, "0")[:6]

    try:
        naive = datetime.fromisoformat(f"{match['date']}T{match['time']}")
        return naive.replace(
            microsecond=int(frac),
            tzinfo=_parse_offset(match["offset"]),
        )
    except ValueError as e:
        raise TimestampDecodeError(f"Invalid timestamp {text!r}: {e}") from e
