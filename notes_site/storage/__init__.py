"""Storage Abstraction Layer for Notes Site.

Provides a unified interface for reading note sources and writing rendered
artifacts, backed by the local filesystem or by memory.

Usage:
    from notes_site.storage import create_storage_backend

    storage = create_storage_backend("local", root_dir="notes", create=False)
    paths = await storage.list_files(pattern="*.md")
    content = await storage.read_bytes(paths[0])
"""

from .base import StorageBackend
from .factory import StorageType
from .factory import create_storage_backend
from .local import LocalStorageBackend
from .memory import MemoryStorageBackend

__all__ = [
    "LocalStorageBackend",
    "MemoryStorageBackend",
    "StorageBackend",
    "StorageType",
    "create_storage_backend",
]
