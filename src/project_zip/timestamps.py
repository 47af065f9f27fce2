"""Conversion between datetimes and packed MS-DOS date/time fields."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple, Optional

from .errors import InvalidTimestampError

MIN_YEAR = 1980
MAX_YEAR = 2107

# The earliest representable instant; used for reproducible archives.
DOS_EPOCH = datetime(1980, 1, 1, 0, 0, 0)


class DosDateTime(NamedTuple):
    time: int
    date: int


def to_dos_datetime(instant: datetime, name: Optional[str] = None) -> DosDateTime:
    """
    Packs `instant` into 16-bit DOS time and date fields.

    Seconds are stored with 2-second resolution and truncated. The wall clock
    fields are used as-is; aware datetimes are not converted to UTC.
    `name` only serves to identify the entry in the error message.
    """
    if not MIN_YEAR <= instant.year <= MAX_YEAR:
        raise InvalidTimestampError(
            name,
            f"timestamp {instant.isoformat()} is outside the DOS date range "
            f"({MIN_YEAR}-{MAX_YEAR})",
        )

    time = (instant.hour << 11) | (instant.minute << 5) | (instant.second // 2)
    date = ((instant.year - MIN_YEAR) << 9) | (instant.month << 5) | instant.day
    return DosDateTime(time=time, date=date)


def from_dos_datetime(time: int, date: int) -> datetime:
    """Unpacks DOS time and date fields into a naive datetime."""
    return datetime(
        (date >> 9) + MIN_YEAR,
        (date >> 5) & 0x0F,
        date & 0x1F,
        time >> 11,
        (time >> 5) & 0x3F,
        (time & 0x1F) * 2,
    )
