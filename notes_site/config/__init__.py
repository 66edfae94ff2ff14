"""Configuration management for the Notes Site pipeline."""

from .settings import SUPPORTED_FORMATS
from .settings import Settings
from .settings import get_settings
from .settings import reset_settings

__all__ = ["SUPPORTED_FORMATS", "Settings", "get_settings", "reset_settings"]
