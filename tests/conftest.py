"""The pytest configuration for Notes Site testing.

Provides temporary notes roots and a factory for writing note files.
"""

import os
import tempfile
from pathlib import Path

import pytest

# Keep the rotating call log out of the package directory during tests.
os.environ.setdefault("NOTES_SITE_LOG_DIR", tempfile.mkdtemp(prefix="notes_site_logs_"))

from notes_site.config import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch):
    """Reset the settings singleton and strip environment overrides between tests."""
    for name in ("NOTES_SOURCE_DIR", "NOTES_OUTPUT_DIR", "OUTPUT_FORMAT", "STORAGE_BACKEND", "SITE_TITLE"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def temp_notes_root():
    """Provide a temporary directory for note sources."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_output_root():
    """Provide a temporary directory for rendered output."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def note_factory(temp_notes_root):
    """Factory for writing note files below the temporary notes root."""

    def _create_note(relative_path: str, content: str) -> Path:
        path = temp_notes_root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _create_note


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests that run the full pipeline")
