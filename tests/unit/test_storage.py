"""Unit tests for storage abstraction layer."""

import pytest

from notes_site.storage import LocalStorageBackend
from notes_site.storage import MemoryStorageBackend
from notes_site.storage import StorageType
from notes_site.storage import create_storage_backend


class TestLocalStorageBackend:
    @pytest.fixture
    def storage(self, temp_notes_root):
        return LocalStorageBackend(root_dir=str(temp_notes_root))

    def test_backend_type(self, storage, temp_notes_root):
        assert storage.backend_type == "local"
        assert storage.root_path == str(temp_notes_root.resolve())

    @pytest.mark.asyncio
    async def test_write_and_read(self, storage, temp_notes_root):
        await storage.write_file("angular/binding.md", "# Binding")

        assert await storage.read_bytes("angular/binding.md") == b"# Binding"
        assert (temp_notes_root / "angular").is_dir()

    @pytest.mark.asyncio
    async def test_read_missing_file(self, storage):
        with pytest.raises(FileNotFoundError):
            await storage.read_bytes("missing.md")

    @pytest.mark.asyncio
    async def test_list_files_recursive_and_sorted(self, storage, note_factory):
        note_factory("b.md", "b")
        note_factory("a/z.md", "z")
        note_factory("a/notes.txt", "ignored")
        note_factory(".hidden/secret.md", "ignored")

        assert await storage.list_files() == ["a/z.md", "b.md"]
        assert await storage.list_files(recursive=False) == ["b.md"]
        assert await storage.list_files("a") == ["a/z.md"]

    @pytest.mark.asyncio
    async def test_list_missing_directory(self, storage):
        assert await storage.list_files("nowhere") == []

    @pytest.mark.asyncio
    async def test_write_keeps_unix_newlines(self, storage, temp_notes_root):
        await storage.write_file("out.html", "a\nb\n")

        assert (temp_notes_root / "out.html").read_bytes() == b"a\nb\n"

    def test_no_create_leaves_missing_root(self, temp_notes_root):
        root = temp_notes_root / "absent"
        LocalStorageBackend(root_dir=str(root), create=False)

        assert not root.exists()


class TestMemoryStorageBackend:
    @pytest.mark.asyncio
    async def test_round_trip_and_listing(self):
        storage = MemoryStorageBackend({"notes/a.md": "# A", "notes/sub/b.md": b"# B", "other.md": "x"})

        assert await storage.read_bytes("notes/a.md") == b"# A"
        assert await storage.list_files("notes") == ["notes/a.md", "notes/sub/b.md"]
        assert await storage.list_files("notes", recursive=False) == ["notes/a.md"]

        await storage.write_file("site/index.html", "<html>")
        assert storage.files["site/index.html"] == "<html>"

    @pytest.mark.asyncio
    async def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            await MemoryStorageBackend().read_bytes("a.md")

    def test_root_path(self):
        assert MemoryStorageBackend().root_path == "memory://"


class TestFactory:
    def test_create_memory_backend(self):
        storage = create_storage_backend(StorageType.MEMORY, files={"a.md": "x"})

        assert storage.backend_type == "memory"
        assert storage.files == {"a.md": "x"}

    def test_create_by_value(self, temp_notes_root):
        storage = create_storage_backend("local", root_dir=str(temp_notes_root / "out"), create=True)

        assert isinstance(storage, LocalStorageBackend)
        assert (temp_notes_root / "out").is_dir()

    def test_memory_ignores_root_dir(self):
        storage = create_storage_backend("memory", root_dir="notes", create=False)

        assert storage.root_path == "memory://"

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            create_storage_backend("gcs", root_dir="notes")
