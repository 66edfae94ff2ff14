"""Note identifier and anchor helpers."""

import re
import unicodedata
from pathlib import PurePosixPath

NOTE_SUFFIX = ".md"

_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_SPACES = re.compile(r"[\s_-]+")


def normalize_identifier(value: str) -> str:
    """Normalise a note identifier or relation target.

    Strips whitespace, converts backslashes, removes a leading ``./`` or ``/``
    and a trailing ``.md`` so ``./angular/binding.md`` and ``angular/binding``
    name the same note.
    """
    ident = value.strip().replace("\\", "/")
    while ident.startswith("./"):
        ident = ident[2:]
    ident = ident.lstrip("/")
    if ident.lower().endswith(NOTE_SUFFIX):
        ident = ident[: -len(NOTE_SUFFIX)]
    return ident.rstrip("/")


def identifier_from_path(path: str) -> str:
    """Derive a note identifier from a storage-relative path."""
    return normalize_identifier(str(PurePosixPath(path.replace("\\", "/"))))


def slugify(text: str) -> str:
    """Turn heading text into a URL-safe anchor."""
    value = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    value = _SLUG_STRIP.sub("", value.lower())
    value = _SLUG_SPACES.sub("-", value).strip("-")
    return value or "section"
