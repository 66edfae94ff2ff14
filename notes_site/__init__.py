"""Notes Site: a content pipeline for collections of Markdown notes.

Loads note files, parses them into heading-delimited sections, resolves the
"related" cross-references between notes and renders every note into a
navigable static artifact.

Usage:
    from notes_site import build_site_sync

    report = build_site_sync(source_dir="notes", output_dir="site")
    for issue in report.issues:
        print(issue["error_code"], issue["message"])
"""

from .exceptions import DanglingReferenceWarning
from .exceptions import LoadError
from .exceptions import MalformedCodeBlockError
from .exceptions import NotesSiteError
from .exceptions import SelfReferenceError
from .loader import load_document
from .loader import load_from_storage
from .loader import load_sources
from .models import Block
from .models import BlockKind
from .models import CrossReference
from .models import Document
from .models import Section
from .parser import SectionOutline
from .parser import parse_document
from .pipeline import build_site
from .pipeline import build_site_sync
from .pipeline import check_site
from .renderers import get_renderer
from .resolver import resolve_references

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockKind",
    "CrossReference",
    "DanglingReferenceWarning",
    "Document",
    "LoadError",
    "MalformedCodeBlockError",
    "NotesSiteError",
    "Section",
    "SectionOutline",
    "SelfReferenceError",
    "build_site",
    "build_site_sync",
    "check_site",
    "get_renderer",
    "load_document",
    "load_from_storage",
    "load_sources",
    "parse_document",
    "resolve_references",
]
