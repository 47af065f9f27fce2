import zlib

import pytest

from project_zip.checksum import CRC_TABLE, crc32


def test_crc32_reference_vectors():
    assert crc32(b"") == 0x00000000
    assert crc32(b"123456789") == 0xCBF43926


def test_crc32_table():
    assert len(CRC_TABLE) == 256
    assert CRC_TABLE[0] == 0
    assert CRC_TABLE[1] == 0x77073096
    assert CRC_TABLE[255] == 0x2D02EF8D


@pytest.mark.parametrize(
    "data",
    [
        b"a",
        b"<html></html>",
        b"console.log(1);",
        bytes(range(256)) * 4,
        "héllo wörld".encode("utf-8"),
    ],
)
def test_crc32_matches_zlib(data):
    assert crc32(data) == zlib.crc32(data)


def test_crc32_incremental():
    whole = b"The quick brown fox jumps over the lazy dog"
    assert crc32(whole[10:], crc32(whole[:10])) == crc32(whole) == 0x414FA339


def test_crc32_accepts_bytes_like():
    assert crc32(bytearray(b"123456789")) == 0xCBF43926
    assert crc32(memoryview(b"123456789")) == 0xCBF43926
