"""Table-driven CRC-32, as used by PKZIP and gzip."""

from __future__ import annotations

from typing import List

POLYNOMIAL = 0xEDB88320


def _make_table() -> List[int]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ POLYNOMIAL if c & 1 else c >> 1
        table.append(c)
    return table


CRC_TABLE = _make_table()


def crc32(data: bytes, value: int = 0) -> int:
    """
    Computes the CRC-32 of `data`.

    `value` is the checksum of whatever came before, so a buffer can be
    checksummed in pieces: crc32(b, crc32(a)) == crc32(a + b).
    """
    table = CRC_TABLE
    crc = value ^ 0xFFFFFFFF
    for byte in data:
        crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
    return crc ^ 0xFFFFFFFF
