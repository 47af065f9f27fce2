from __future__ import annotations

import hashlib
import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

MANIFEST_NAME = "export_manifest.json"


def archive_metadata(data: bytes, entry_count: int) -> Dict:
    return {
        "entries": entry_count,
        "size": len(data),
        "sha256": hashlib.sha256(data).hexdigest(),
    }


class ManifestGenerator:
    """Records every archive written during an export run."""

    def __init__(self, dist_path: Path):
        self.dist_path = dist_path
        self.artifacts: List[Dict] = []
        self._lock = threading.Lock()

    def add_artifact(
        self,
        name: str,
        path: Union[Path, str],
        metadata: Optional[Dict] = None,
    ) -> None:
        if isinstance(path, Path):
            try:
                display_path = path.absolute().relative_to(self.dist_path.absolute()).as_posix()
            except ValueError:
                display_path = str(path)
        else:
            display_path = str(path)

        with self._lock:
            self.artifacts.append(
                {
                    "name": name,
                    "path": display_path,
                    "metadata": metadata or {},
                }
            )

    def save(self) -> Path:
        manifest_path = self.dist_path / MANIFEST_NAME
        with self._lock:
            artifacts = sorted(self.artifacts, key=lambda a: a["name"])
        with open(manifest_path, "w") as f:
            json.dump({"artifacts": artifacts}, f, indent=2)
        print(f"Manifest saved to: {manifest_path}")
        return manifest_path
