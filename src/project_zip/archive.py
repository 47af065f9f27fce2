"""In-memory assembler for stored (uncompressed) ZIP archives."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .checksum import crc32
from .entry import Content, Entry
from .errors import DuplicateEntryError, OversizeArchiveError
from .records import (
    END_OF_CENTRAL_DIRECTORY_SIZE,
    build_central_record,
    build_eocd,
    build_local_header,
    central_record_size,
    local_record_size,
)

MAX_ENTRIES = 0xFFFF
MAX_OFFSET = 0xFFFFFFFF


def generate(entries: Iterable[Entry]) -> bytes:
    """
    Serializes `entries`, in order, into a complete ZIP archive.

    The entries are checked against the format limits exactly as
    `ZipBuilder.add_entry` checks them, so the same errors are raised.
    """
    builder = ZipBuilder()
    for entry in entries:
        builder.add_entry(entry)
    return builder.generate()


def _serialize(entries: List[Entry]) -> bytes:
    # Local records come first, each one's start offset recorded as it is
    # emitted. The central directory follows, then the end record.
    # Entries must already be validated.
    local_records: List[bytes] = []
    placed: List[Tuple[Entry, int, int]] = []
    offset = 0

    for entry in entries:
        crc = crc32(entry.content)
        record = build_local_header(entry, crc)
        placed.append((entry, crc, offset))
        local_records.append(record)
        offset += len(record)

    central_records = [
        build_central_record(entry, crc, local_offset)
        for entry, crc, local_offset in placed
    ]
    central_dir = b"".join(central_records)
    eocd = build_eocd(len(central_records), len(central_dir), offset)
    return b"".join(local_records) + central_dir + eocd


class ZipBuilder:
    """
    Collects entries for a single export and serializes them.

    Entries can only be appended. Every limit of the classic ZIP format is
    checked when an entry is added, so a failed `add` leaves the builder
    untouched and `generate` itself cannot fail. `generate` may be called any
    number of times and always returns the same bytes.
    """

    def __init__(self, timestamp: Optional[datetime] = None):
        # None means "the time the entry was added".
        self.timestamp = timestamp
        self._entries: List[Entry] = []
        self._names: Set[str] = set()
        self._local_size = 0
        self._central_size = 0

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(tuple(self._entries))

    def add(
        self, name: str, content: Content, timestamp: Optional[datetime] = None
    ) -> Entry:
        """Creates an entry from `name` and `content` and appends it."""
        if timestamp is None:
            timestamp = self.timestamp or datetime.now()
        entry = Entry(name=name, content=content, timestamp=timestamp)
        self.add_entry(entry)
        return entry

    def add_entry(self, entry: Entry) -> None:
        if entry.name in self._names:
            raise DuplicateEntryError(entry.name, "an entry with this name was already added")

        if len(self._entries) + 1 > MAX_ENTRIES:
            raise OversizeArchiveError(
                entry.name, f"archives are limited to {MAX_ENTRIES} entries"
            )

        local_size = self._local_size + local_record_size(entry)
        central_size = self._central_size + central_record_size(entry)
        if local_size > MAX_OFFSET or central_size > MAX_OFFSET:
            raise OversizeArchiveError(
                entry.name, "archive would exceed the 4 GiB limit of 32-bit offsets"
            )

        self._entries.append(entry)
        self._names.add(entry.name)
        self._local_size = local_size
        self._central_size = central_size

    def size(self) -> int:
        """Length in bytes of the archive `generate` will return."""
        return self._local_size + self._central_size + END_OF_CENTRAL_DIRECTORY_SIZE

    def generate(self) -> bytes:
        return _serialize(self._entries)
