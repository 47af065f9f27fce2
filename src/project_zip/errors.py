"""Exceptions raised while adding entries to an archive."""

from __future__ import annotations

from typing import Optional


class ArchiveError(Exception):
    """
    Base class for every archive failure.

    Carries the name of the offending entry (when there is one) and a
    human readable reason so callers can report exactly what went wrong.
    """

    def __init__(self, name: Optional[str], reason: str):
        self.name = name
        self.reason = reason
        if name is None:
            super().__init__(reason)
        else:
            super().__init__(f"{name!r}: {reason}")


class ArchiveValueError(ArchiveError, ValueError):
    pass


class EncodingError(ArchiveValueError):
    """The entry name cannot be stored in the archive."""


class InvalidTimestampError(ArchiveValueError):
    """The timestamp lies outside the DOS date range (1980-2107)."""


class DuplicateEntryError(ArchiveValueError):
    """An entry with the same name was already added."""


class ArchiveOverflowError(ArchiveError, OverflowError):
    pass


class OversizeContentError(ArchiveOverflowError):
    """The entry content does not fit the 32-bit size fields."""


class OversizeArchiveError(ArchiveOverflowError):
    """The archive would exceed the 16-bit entry count or 32-bit offsets."""
