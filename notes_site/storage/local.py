"""Local Filesystem Storage Backend.

Implements the StorageBackend interface using the local filesystem.
This is the default backend for both note sources and rendered output.
"""

from __future__ import annotations

import fnmatch
from pathlib import Path

from .base import StorageBackend


class LocalStorageBackend(StorageBackend):
    """Storage backend using the local filesystem.

    Args:
        root_dir: Root directory, relative paths resolved against the working directory
        create: Create the root directory if it does not exist
    """

    def __init__(self, root_dir: str, create: bool = True):
        self._root = Path(root_dir).resolve()

        if create:
            self._root.mkdir(parents=True, exist_ok=True)

    @property
    def backend_type(self) -> str:
        return "local"

    @property
    def root_path(self) -> str:
        return str(self._root)

    def _full_path(self, path: str) -> Path:
        """Convert relative path to absolute path."""
        return self._root / path

    # === File Operations ===

    async def read_bytes(self, path: str) -> bytes:
        full_path = self._full_path(path)
        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return full_path.read_bytes()

    async def write_file(self, path: str, content: str) -> None:
        full_path = self._full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps "\n" on every platform so output is byte-stable
        with full_path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    # === Directory Operations ===

    async def list_files(self, path: str = "", pattern: str = "*.md", recursive: bool = True) -> list[str]:
        full_path = self._full_path(path)
        if not full_path.is_dir():
            return []

        candidates = full_path.rglob("*") if recursive else full_path.iterdir()
        files = []
        for item in candidates:
            relative = item.relative_to(self._root)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if item.is_file() and fnmatch.fnmatch(item.name, pattern):
                files.append(relative.as_posix())

        return sorted(files)
