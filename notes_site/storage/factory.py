"""Storage Backend Factory.

Selects the storage backend named by the ``storage_backend`` setting:
- Memory: STORAGE_BACKEND=memory (dry runs, tests)
- Local: Default
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import StorageBackend


class StorageType(Enum):
    """Available storage backend types."""

    LOCAL = "local"
    MEMORY = "memory"


def create_storage_backend(
    storage_type: StorageType | str,
    **kwargs,
) -> StorageBackend:
    """Create a storage backend instance.

    Args:
        storage_type: Storage type, or its value ("local", "memory")
        **kwargs: Backend-specific configuration (root_dir, create, files)

    Raises:
        ValueError: If ``storage_type`` names no known backend
    """
    storage_type = StorageType(storage_type)

    if storage_type == StorageType.MEMORY:
        from .memory import MemoryStorageBackend

        return MemoryStorageBackend(files=kwargs.get("files"))

    from .local import LocalStorageBackend

    return LocalStorageBackend(
        root_dir=kwargs["root_dir"],
        create=kwargs.get("create", True),
    )
