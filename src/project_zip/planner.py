"""The Planner transforms the user configuration into a list of ExportTargets."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .config import ExportConfig, FileType, ProjectFile

SKIPPED_DIRS = {".git"}


@dataclass(frozen=True)
class ExportTarget:
    """
    Represents a single project to be packaged into one archive.
    This is the Intermediate Representation (IR) consumed by the exporters.
    """

    name: str
    display_name: str
    path: Optional[Path] = None
    files: List[ProjectFile] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    timestamp: Optional[datetime] = None
    output: Optional[str] = None


def iter_tree_files(files: Iterable[ProjectFile]) -> Iterator[Tuple[str, str]]:
    """
    Yields (path, content) for every file of a project tree, depth-first.

    Folders are descended into but never yielded themselves, and files
    without content are skipped.
    """
    for node in files:
        if node.type == FileType.FOLDER:
            yield from iter_tree_files(node.children)
        elif node.content:
            yield node.path.lstrip("/"), node.content


def _is_excluded(rel: str, patterns: List[str]) -> bool:
    return any(fnmatch.fnmatch(rel, pattern) for pattern in patterns)


def iter_directory_files(
    root: Path, exclude: Optional[List[str]] = None
) -> Iterator[Tuple[str, bytes]]:
    """Yields (posix relative path, bytes) for every file under `root`, sorted."""
    exclude = exclude or []
    # os.walk is not guaranteed to be sorted, so we sort explicitly.
    for dirpath, dirs, files in os.walk(root):
        dirs[:] = sorted(
            d
            for d in dirs
            if d not in SKIPPED_DIRS
            and not _is_excluded((Path(dirpath) / d).relative_to(root).as_posix(), exclude)
        )
        for file in sorted(files):
            file_path = Path(dirpath) / file
            rel = file_path.relative_to(root).as_posix()
            if _is_excluded(rel, exclude):
                continue
            yield rel, file_path.read_bytes()


class Planner:
    """Resolves the configured projects into export targets and their entries."""

    def __init__(self, config: ExportConfig):
        self.config = config

    def plan(self) -> List[ExportTarget]:
        """Creates one ExportTarget per configured project, in configuration order."""
        targets = []
        for name, project in self.config.projects.items():
            targets.append(
                ExportTarget(
                    name=name,
                    display_name=project.name or name,
                    path=project.path,
                    files=project.files,
                    exclude=project.exclude,
                    timestamp=project.timestamp or self.config.timestamp_default,
                    output=project.output,
                )
            )
        return targets

    @staticmethod
    def entries(target: ExportTarget) -> List[Tuple[str, bytes]]:
        """Returns the ordered (name, content) pairs to archive for `target`."""
        entries: List[Tuple[str, bytes]] = []
        if target.path is not None:
            if not target.path.is_dir():
                raise FileNotFoundError(f"Project directory not found: {target.path}")
            entries.extend(iter_directory_files(target.path, target.exclude))
        entries.extend(
            (path, content.encode("utf-8")) for path, content in iter_tree_files(target.files)
        )
        return entries
