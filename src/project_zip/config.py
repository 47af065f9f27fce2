"""Configuration schema for project-zip using Pydantic."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, model_validator


class FileType(str, Enum):
    """Kinds of node in a project file tree."""

    FILE = "file"
    FOLDER = "folder"


class ProjectFile(BaseModel):
    """A node of a generated project's file tree."""

    path: str
    """Project-relative path, '/' separated (e.g. 'src/app.js')."""

    type: FileType = FileType.FILE
    """Whether this node is a file or a folder. Folders are never archived."""

    content: str = ""
    """Text content of a file. Files without content are skipped on export."""

    children: List[ProjectFile] = Field(default_factory=list)
    """Nested nodes of a folder."""


ProjectFile.model_rebuild()


class ProjectConfig(BaseModel):
    """Configuration for a single project to export."""

    name: Optional[str] = None
    """Display name used to derive the archive filename. Defaults to the project key."""

    path: Optional[Path] = None
    """Directory whose files are archived."""

    files: List[ProjectFile] = Field(default_factory=list)
    """Inline file tree, archived after the files found under 'path'."""

    exclude: List[str] = Field(default_factory=list)
    """Glob patterns (matched against relative paths) skipped when walking 'path'."""

    timestamp: Optional[datetime] = None
    """Modification time stored for every entry. Defaults to ExportConfig.timestamp_default."""

    output: Optional[str] = None
    """Fixed archive filename. When unset a '<name>-<millis>.zip' name is suggested."""

    @model_validator(mode="after")
    def _require_source(self) -> ProjectConfig:
        if self.path is None and not self.files:
            raise ValueError("a project needs a 'path' or inline 'files'")
        return self


class ExportConfig(BaseModel):
    """Root configuration object for a project-zip run."""

    timestamp_default: Optional[datetime] = None
    """Global entry timestamp. When unset, entries are stamped with the export time."""

    projects: Dict[str, ProjectConfig] = Field(default_factory=dict)
    """Map of project names to their configurations."""

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> ExportConfig:
        """Loads and validates an ExportConfig from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})
