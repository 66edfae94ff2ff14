"""In-Memory Storage Backend.

Holds files in a dictionary keyed by relative path. Used for dry runs
(``check``) and for feeding sources that never touch the filesystem.
"""

from __future__ import annotations

import fnmatch

from .base import StorageBackend


class MemoryStorageBackend(StorageBackend):
    """Storage backend keeping every file in memory."""

    def __init__(self, files: dict[str, str | bytes] | None = None):
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self._store(path, content.encode("utf-8") if isinstance(content, str) else content)

    def _store(self, path: str, data: bytes) -> None:
        self._files[self._key(path)] = data

    @staticmethod
    def _key(path: str) -> str:
        return path.replace("\\", "/").strip("/")

    @property
    def backend_type(self) -> str:
        return "memory"

    @property
    def root_path(self) -> str:
        return "memory://"

    @property
    def files(self) -> dict[str, str]:
        """Snapshot of stored files decoded as text."""
        return {path: data.decode("utf-8", errors="replace") for path, data in sorted(self._files.items())}

    # === File Operations ===

    async def read_bytes(self, path: str) -> bytes:
        try:
            return self._files[self._key(path)]
        except KeyError:
            raise FileNotFoundError(f"File not found: {path}") from None

    async def write_file(self, path: str, content: str) -> None:
        self._store(path, content.encode("utf-8"))

    # === Directory Operations ===

    async def list_files(self, path: str = "", pattern: str = "*.md", recursive: bool = True) -> list[str]:
        prefix = self._key(path)
        files = []
        for key in self._files:
            if prefix:
                if not key.startswith(prefix + "/"):
                    continue
                relative = key[len(prefix) + 1 :]
            else:
                relative = key
            parts = relative.split("/")
            if not recursive and len(parts) > 1:
                continue
            if any(part.startswith(".") for part in parts):
                continue
            if fnmatch.fnmatch(parts[-1], pattern):
                files.append(key)
        return sorted(files)
