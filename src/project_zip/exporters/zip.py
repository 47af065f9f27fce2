"""Writes project archives to disk."""

from __future__ import annotations

import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..archive import ZipBuilder

EntrySource = Iterable[Tuple[str, Union[bytes, str]]]


def slugify(project_name: str) -> str:
    return re.sub(r"\s+", "-", project_name.lower())


def suggest_filename(project_name: str, when: Optional[datetime] = None) -> str:
    """
    Suggests a download name such as 'my-app-1718031600000.zip'.

    The project name is lower-cased with whitespace runs replaced by '-',
    followed by the export time in epoch milliseconds.
    """
    when = when or datetime.now()
    return f"{slugify(project_name)}-{int(when.timestamp() * 1000)}.zip"


class ZipExporter:
    """
    Packages (name, content) pairs into a stored ZIP archive.

    Each call builds its own ZipBuilder, so one exporter can serve several
    exports, also concurrently.
    """

    def __init__(self, timestamp: Optional[datetime] = None):
        # None stamps every entry with the time of the export.
        self.timestamp = timestamp

    def assemble(self, entries: EntrySource) -> ZipBuilder:
        builder = ZipBuilder(timestamp=self.timestamp or datetime.now())
        for name, content in entries:
            builder.add(name, content)
        return builder

    def build(self, entries: EntrySource) -> bytes:
        """Returns the archive bytes for `entries`."""
        return self.assemble(entries).generate()

    def export(self, entries: EntrySource, dest_zip: Path) -> bytes:
        """
        Writes the archive for `entries` to `dest_zip`.

        The archive is fully generated before anything touches the disk, then
        written to a temporary file next to `dest_zip` and renamed into place.
        If anything fails, no file is left at `dest_zip`.
        Returns the archive bytes.
        """
        data = self.build(entries)

        dest_zip.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=dest_zip.parent, prefix=f".{dest_zip.name}.", suffix=".part", delete=False
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                tmp.write(data)
            except BaseException:
                tmp.close()
                tmp_path.unlink()
                raise

        try:
            os.replace(tmp_path, dest_zip)
        finally:
            # Only left behind if the rename failed.
            if tmp_path.exists():
                tmp_path.unlink()

        print(f"Exported ZIP: {dest_zip}")
        return data
