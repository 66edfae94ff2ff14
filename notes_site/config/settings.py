"""Centralized configuration management for the Notes Site pipeline.

This module provides a single source of truth for source and output
locations, rendering options and logging settings.
"""

from __future__ import annotations

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

SUPPORTED_FORMATS = ("html", "json")
STORAGE_BACKENDS = ("auto", "local", "memory")


class Settings(BaseSettings):
    """Centralized settings for the Notes Site pipeline."""

    # === Source and Output Locations ===
    notes_source_dir: str = Field(default="notes", description="Directory holding the Markdown notes")
    notes_output_dir: str = Field(default="site", description="Directory rendered artifacts are written to")
    notes_pattern: str = Field(default="*.md", description="Glob pattern selecting note files")
    storage_backend: str = Field(default="auto", description="Storage backend: 'auto', 'local', or 'memory'")

    # === Rendering ===
    output_format: str = Field(default="html", description="Output format: 'html' or 'json'")
    site_title: str = Field(default="Notes", description="Title used for the index page")
    relation_key: str = Field(default="related", description="Frontmatter key declaring related notes")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")
    structured_logging: bool = Field(default=True, description="Enable structured JSON error logging")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, value: str) -> str:
        """Normalise and check the output format name."""
        value = value.strip().lower()
        if value not in SUPPORTED_FORMATS:
            raise ValueError(f"output_format must be one of {', '.join(SUPPORTED_FORMATS)}")
        return value

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in STORAGE_BACKENDS:
            raise ValueError(f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def storage_type(self) -> Literal["local", "memory"]:
        """Determine the active storage backend type."""
        if self.storage_backend == "memory":
            return "memory"
        return "local"


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
