"""
Binary record layouts of the classic (non-ZIP64) stored ZIP format.

Every record is packed little-endian with a precompiled `struct.Struct`.
The builders are plain functions: entry metadata in, bytes out.
"""

from __future__ import annotations

import struct

from .entry import Entry

LOCAL_FILE_HEADER_SIGNATURE = 0x04034B50  # "PK\x03\x04"
CENTRAL_DIRECTORY_SIGNATURE = 0x02014B50  # "PK\x01\x02"
END_OF_CENTRAL_DIRECTORY_SIGNATURE = 0x06054B50  # "PK\x05\x06"

VERSION_MADE_BY = 20
VERSION_NEEDED = 20
FLAGS = 0
METHOD_STORED = 0

LOCAL_FILE_HEADER = struct.Struct("<IHHHHHIIIHH")
CENTRAL_DIRECTORY_HEADER = struct.Struct("<IHHHHHHIIIHHHHHII")
END_OF_CENTRAL_DIRECTORY = struct.Struct("<IHHHHIIH")

LOCAL_FILE_HEADER_SIZE = LOCAL_FILE_HEADER.size  # 30
CENTRAL_DIRECTORY_HEADER_SIZE = CENTRAL_DIRECTORY_HEADER.size  # 46
END_OF_CENTRAL_DIRECTORY_SIZE = END_OF_CENTRAL_DIRECTORY.size  # 22


def local_record_size(entry: Entry) -> int:
    return LOCAL_FILE_HEADER_SIZE + len(entry.name_bytes) + entry.size


def central_record_size(entry: Entry) -> int:
    return CENTRAL_DIRECTORY_HEADER_SIZE + len(entry.name_bytes)


def build_local_header(entry: Entry, crc: int) -> bytes:
    """Returns the local file header followed by the name and the raw content."""
    header = LOCAL_FILE_HEADER.pack(
        LOCAL_FILE_HEADER_SIGNATURE,
        VERSION_NEEDED,
        FLAGS,
        METHOD_STORED,
        entry.dos_datetime.time,
        entry.dos_datetime.date,
        crc,
        entry.size,  # compressed size: stored entries are not compressed
        entry.size,
        len(entry.name_bytes),
        0,  # extra field length
    )
    return header + entry.name_bytes + entry.content


def build_central_record(entry: Entry, crc: int, local_header_offset: int) -> bytes:
    """Returns the central directory header for `entry` followed by its name."""
    header = CENTRAL_DIRECTORY_HEADER.pack(
        CENTRAL_DIRECTORY_SIGNATURE,
        VERSION_MADE_BY,
        VERSION_NEEDED,
        FLAGS,
        METHOD_STORED,
        entry.dos_datetime.time,
        entry.dos_datetime.date,
        crc,
        entry.size,
        entry.size,
        len(entry.name_bytes),
        0,  # extra field length
        0,  # file comment length
        0,  # disk number start
        0,  # internal attributes
        0,  # external attributes
        local_header_offset,
    )
    return header + entry.name_bytes


def build_eocd(entry_count: int, central_dir_size: int, central_dir_offset: int) -> bytes:
    """Returns the end of central directory record of a single-volume archive."""
    return END_OF_CENTRAL_DIRECTORY.pack(
        END_OF_CENTRAL_DIRECTORY_SIGNATURE,
        0,  # number of this disk
        0,  # disk where the central directory starts
        entry_count,
        entry_count,
        central_dir_size,
        central_dir_offset,
        0,  # comment length
    )
