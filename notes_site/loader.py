"""Document loading.

Turns raw text sources into immutable ``Document`` records. A source that
cannot be read produces a ``LoadError`` which is collected rather than
raised, so one bad file never stops the rest of the batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from .exceptions import LoadError
from .logger_config import ErrorCategory
from .logger_config import log_structured_error
from .logger_config import pipeline_logger
from .models import Document
from .storage.base import StorageBackend
from .utils.frontmatter import related_identifiers
from .utils.frontmatter import split_frontmatter
from .utils.identifiers import identifier_from_path
from .utils.identifiers import normalize_identifier


@dataclass
class LoadResult:
    """Documents loaded from a batch of sources plus the per-source failures."""

    documents: list[Document] = field(default_factory=list)
    errors: list[LoadError] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set, repr=False)

    @property
    def by_id(self) -> dict[str, Document]:
        return {document.identifier: document for document in self.documents}

    def _add(self, outcome: Document | LoadError) -> None:
        if isinstance(outcome, LoadError):
            self.errors.append(outcome)
            return
        if outcome.identifier in self._seen:
            self.errors.append(_report(LoadError(outcome.source_path or outcome.identifier, "duplicate identifier")))
            return
        self._seen.add(outcome.identifier)
        self.documents.append(outcome)


def split_lines(text: str) -> list[str]:
    """Split text into lines, normalising line endings and keeping all other whitespace."""
    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def load_document(
    identifier: str,
    text: str,
    source_path: str | None = None,
    relation_key: str = "related",
) -> Document:
    """Build a Document from raw note text.

    Frontmatter is parsed for metadata and related-note declarations; the
    remaining lines become the document body in their original order.
    """
    ident = normalize_identifier(identifier)
    if not ident:
        raise LoadError(source_path or identifier, "empty identifier")

    text = text.removeprefix("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    metadata, body, consumed = split_frontmatter(text)

    related: list[str] = []
    for raw in related_identifiers(metadata, relation_key):
        target = normalize_identifier(raw)
        if target and target not in related:
            related.append(target)

    return Document(
        identifier=ident,
        lines=tuple(split_lines(body)),
        related=tuple(related),
        metadata=metadata,
        source_path=source_path,
        body_start_line=consumed + 1,
    )


def _decode(source: str, data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise LoadError(source, f"not valid UTF-8 ({e.reason} at byte {e.start})") from e


def _read_source(name: str, source: Any) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray)):
        return _decode(name, bytes(source))
    if hasattr(source, "read"):
        try:
            data = source.read()
        except (OSError, ValueError) as e:
            raise LoadError(name, str(e)) from e
        if isinstance(data, (bytes, bytearray)):
            return _decode(name, bytes(data))
        if isinstance(data, str):
            return data
        raise LoadError(name, f"reader returned {type(data).__name__}")
    raise LoadError(name, f"unsupported source type {type(source).__name__}")


def _report(error: LoadError) -> LoadError:
    log_structured_error(
        category=ErrorCategory.WARNING,
        message=error.message,
        context=error.details,
        operation="load_document",
    )
    return error


def load_sources(sources: Mapping[str, Any], relation_key: str = "related") -> LoadResult:
    """Load Documents from named in-memory sources.

    Args:
        sources: Mapping of source name (e.g. "angular/binding.md") to text,
            bytes or a file-like object with ``read()``

    Returns:
        LoadResult in the mapping's iteration order
    """
    result = LoadResult()
    for name, source in sources.items():
        try:
            text = _read_source(name, source)
            result._add(load_document(identifier_from_path(name), text, name, relation_key))
        except LoadError as e:
            result._add(_report(e))
    pipeline_logger.info(f"Loaded {len(result.documents)} documents from {len(sources)} sources")
    return result


async def _load_path(
    storage: StorageBackend, path: str, identifier: str, relation_key: str
) -> Document | LoadError:
    try:
        data = await storage.read_bytes(path)
    except FileNotFoundError:
        return _report(LoadError(path, "file not found", {"backend": storage.backend_type}))
    except OSError as e:
        return _report(LoadError(path, str(e), {"backend": storage.backend_type}))
    try:
        return load_document(identifier, _decode(path, data), path, relation_key)
    except LoadError as e:
        return _report(e)


async def load_from_storage(
    storage: StorageBackend,
    path: str = "",
    pattern: str = "*.md",
    relation_key: str = "related",
) -> LoadResult:
    """Load every matching note below ``path`` concurrently.

    Identifiers are file paths relative to ``path`` without the ``.md``
    suffix. An empty or missing directory yields an empty result.
    """
    files = await storage.list_files(path, pattern)
    prefix = path.strip("/") + "/" if path.strip("/") else ""

    outcomes = await asyncio.gather(
        *(
            _load_path(storage, file_path, identifier_from_path(file_path[len(prefix) :]), relation_key)
            for file_path in files
        )
    )

    result = LoadResult()
    for outcome in outcomes:
        result._add(outcome)
    pipeline_logger.info(
        f"Loaded {len(result.documents)} documents from {storage.backend_type}:{storage.root_path}/{path}"
        f" ({len(result.errors)} failed)"
    )
    return result
