"""The archive entry: a named, timestamped, immutable byte payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from .errors import EncodingError, OversizeContentError
from .timestamps import DOS_EPOCH, DosDateTime, to_dos_datetime

MAX_CONTENT_SIZE = 0xFFFFFFFE
MAX_NAME_SIZE = 0xFFFF

Content = Union[bytes, bytearray, memoryview, str]


def encode_name(name: str) -> bytes:
    """Validates an archive-internal path and returns its UTF-8 bytes."""
    if not name:
        raise EncodingError(name, "entry name is empty")
    if "\\" in name:
        raise EncodingError(name, "entry names must use '/' as path separator")
    if name.startswith("/"):
        raise EncodingError(name, "entry names must be relative")

    try:
        name_bytes = name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(name, f"name is not representable as UTF-8 ({e.reason})") from e

    if len(name_bytes) > MAX_NAME_SIZE:
        raise EncodingError(
            name, f"encoded name is {len(name_bytes)} bytes, limit is {MAX_NAME_SIZE}"
        )
    return name_bytes


@dataclass(frozen=True)
class Entry:
    """
    A single file inside the archive.

    `content` is copied into an immutable bytes object on construction (text is
    UTF-8 encoded), and every field is validated so that a constructed Entry can
    always be serialized.
    """

    name: str
    content: bytes
    timestamp: datetime = DOS_EPOCH
    name_bytes: bytes = field(init=False, repr=False, compare=False)
    dos_datetime: DosDateTime = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        content = self.content
        if isinstance(content, str):
            content = content.encode("utf-8")
        elif isinstance(content, (bytearray, memoryview)):
            content = bytes(content)
        elif not isinstance(content, bytes):
            raise TypeError(
                f"{self.name!r}: content must be bytes-like or str, "
                f"not {type(content).__name__}"
            )

        if len(content) > MAX_CONTENT_SIZE:
            raise OversizeContentError(
                self.name,
                f"content is {len(content)} bytes, the 32-bit size fields allow "
                f"at most {MAX_CONTENT_SIZE}",
            )

        # Frozen dataclass: derived fields are set through object.__setattr__.
        object.__setattr__(self, "content", content)
        object.__setattr__(self, "name_bytes", encode_name(self.name))
        object.__setattr__(self, "dos_datetime", to_dos_datetime(self.timestamp, self.name))

    @property
    def size(self) -> int:
        return len(self.content)
