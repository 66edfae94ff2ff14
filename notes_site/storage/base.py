"""Abstract Base Class for Storage Backends.

Defines the interface that note sources and output targets implement.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    All storage implementations (local filesystem, in-memory) must
    implement this interface for consistent loading and writing.
    """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Return the backend type identifier (e.g., 'local', 'memory')."""
        pass

    @property
    @abstractmethod
    def root_path(self) -> str:
        """Return the root path for storage."""
        pass

    # === File Operations ===

    @abstractmethod
    async def read_bytes(self, path: str) -> bytes:
        """Read raw file content.

        Args:
            path: Relative path from storage root (e.g., "angular/binding.md")

        Raises:
            FileNotFoundError: If file does not exist
        """
        pass

    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """Write content to a file, creating parent directories as needed."""
        pass

    # === Directory Operations ===

    @abstractmethod
    async def list_files(self, path: str = "", pattern: str = "*.md", recursive: bool = True) -> list[str]:
        """List files matching a pattern.

        Args:
            path: Relative path from storage root
            pattern: Glob pattern matched against file names (e.g., "*.md")
            recursive: Descend into subdirectories

        Returns:
            Sorted list of matching file paths relative to storage root,
            using "/" separators. Hidden entries are skipped.
        """
        pass
