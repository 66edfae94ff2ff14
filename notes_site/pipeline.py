"""Build pipeline: load, parse, resolve, render and write a notes site.

No single document's failure stops the build. Every problem found along the
way is converted to a report entry and returned in the ``BuildReport``.
"""

from __future__ import annotations

import asyncio

from .config import Settings
from .config import get_settings
from .exceptions import NotesSiteError
from .exceptions import OutputError
from .exceptions import PathConflictWarning
from .exceptions import RenderError
from .loader import load_from_storage
from .logger_config import ErrorCategory
from .logger_config import log_async_pipeline_call
from .logger_config import log_structured_error
from .logger_config import pipeline_logger
from .logger_config import safe_operation
from .models import BuildReport
from .models import RenderedArtifact
from .parser import ParsedDocument
from .parser import parse_document
from .renderers import Renderer
from .renderers import get_renderer
from .resolver import ReferenceGraph
from .resolver import resolve_references
from .storage import StorageBackend
from .storage import create_storage_backend


def _as_storage(target: StorageBackend | str, settings: Settings, create: bool) -> StorageBackend:
    if isinstance(target, StorageBackend):
        return target
    return create_storage_backend(settings.storage_type, root_dir=target, create=create)


def render_all(
    parsed: list[ParsedDocument],
    graph: ReferenceGraph,
    renderer: Renderer,
    site_title: str,
) -> tuple[list[RenderedArtifact], list[NotesSiteError]]:
    """Render every parsed document plus the index page."""
    artifacts: list[RenderedArtifact] = []
    errors: list[NotesSiteError] = []

    for item in parsed:
        identifier = item.document.identifier
        success, artifact, error = safe_operation(
            "render_document",
            renderer.artifact,
            item.document,
            item.sections,
            graph.neighbours(identifier),
            context={"document_id": identifier},
        )
        if success:
            artifacts.append(artifact)
        else:
            render_error = RenderError(renderer.name, f"{identifier}: {error}")
            render_error.details["document_id"] = identifier
            errors.append(render_error)

    owners = {artifact.path: artifact.document_id for artifact in artifacts}
    preferred = renderer.index_path()
    index_path = renderer.index_path(owners)
    if index_path != preferred:
        conflict = PathConflictWarning(preferred, owners[preferred], index_path)
        log_structured_error(
            category=ErrorCategory.WARNING,
            message=conflict.message,
            context=conflict.details,
            operation="render_all",
        )
        errors.append(conflict)

    artifacts.append(
        RenderedArtifact(
            document_id="",
            output_format=renderer.name,
            path=index_path,
            content=renderer.render_index(site_title, [item.document for item in parsed], graph.edges),
        )
    )
    return artifacts, errors


def _output_error(path: str, reason: str, exception: Exception | None = None) -> OutputError:
    error = OutputError(path, reason)
    log_structured_error(
        category=ErrorCategory.ERROR,
        message=error.message,
        exception=exception,
        context=error.details,
        operation="write_artifacts",
    )
    return error


async def write_artifacts(output: StorageBackend, artifacts: list[RenderedArtifact]) -> tuple[list[str], list[OutputError]]:
    """Write artifacts concurrently; a failed write is reported, not raised.

    Only the first artifact for a path is written; later ones are reported
    as duplicates.
    """
    unique: list[RenderedArtifact] = []
    errors: list[OutputError] = []
    seen: set[str] = set()
    for artifact in artifacts:
        if artifact.path in seen:
            errors.append(_output_error(artifact.path, "duplicate artifact path"))
        else:
            seen.add(artifact.path)
            unique.append(artifact)

    async def _write(artifact: RenderedArtifact) -> OutputError | None:
        try:
            await output.write_file(artifact.path, artifact.content)
        except OSError as e:
            return _output_error(artifact.path, str(e), e)
        return None

    outcomes = await asyncio.gather(*(_write(artifact) for artifact in unique))
    written = [artifact.path for artifact, outcome in zip(unique, outcomes) if outcome is None]
    return written, errors + [outcome for outcome in outcomes if outcome is not None]


@log_async_pipeline_call
async def build_site(
    source: StorageBackend | str | None = None,
    output: StorageBackend | str | None = None,
    output_format: str | None = None,
    settings: Settings | None = None,
    write: bool = True,
) -> BuildReport:
    """Build the site from ``source`` into ``output``.

    Args:
        source: Storage or directory holding the notes (default: settings)
        output: Storage or directory for rendered artifacts (default: settings)
        output_format: "html" or "json" (default: settings)
        settings: Settings to use instead of the global instance
        write: When False, render in memory only and write nothing

    Raises:
        RenderError: If ``output_format`` is unknown
    """
    settings = settings or get_settings()
    renderer = get_renderer(output_format or settings.output_format)
    source_storage = _as_storage(source if source is not None else settings.notes_source_dir, settings, create=False)

    loaded = await load_from_storage(source_storage, pattern=settings.notes_pattern, relation_key=settings.relation_key)
    documents = sorted(loaded.documents, key=lambda d: d.identifier)
    issues: list[NotesSiteError] = list(loaded.errors)

    parsed = [parse_document(document) for document in documents]
    for item in parsed:
        issues.extend(item.issues)

    graph = resolve_references(documents)
    issues.extend(graph.issues)

    artifacts, render_errors = render_all(parsed, graph, renderer, settings.site_title)
    issues.extend(render_errors)

    output_dir = None
    written: list[str] = []
    if write:
        output_storage = _as_storage(output if output is not None else settings.notes_output_dir, settings, create=True)
        output_dir = output_storage.root_path
        written, write_errors = await write_artifacts(output_storage, artifacts)
        issues.extend(write_errors)
    else:
        written = [artifact.path for artifact in artifacts]

    report = BuildReport(
        source=source_storage.root_path,
        output_dir=output_dir,
        output_format=renderer.name,
        documents=[document.identifier for document in documents],
        artifacts=written,
        edges=[edge.pair for edge in graph.edges],
        issues=[issue.to_dict() for issue in issues],
    )
    pipeline_logger.info(
        f"Build finished: {len(report.documents)} documents, {len(report.artifacts)} artifacts, "
        f"{report.error_count} errors, {report.warning_count} warnings"
    )
    return report


async def check_site(
    source: StorageBackend | str | None = None,
    settings: Settings | None = None,
) -> BuildReport:
    """Run the whole pipeline without writing anything."""
    return await build_site(source=source, settings=settings, write=False)


def build_site_sync(
    source_dir: StorageBackend | str | None = None,
    output_dir: StorageBackend | str | None = None,
    output_format: str | None = None,
    settings: Settings | None = None,
) -> BuildReport:
    """Synchronous wrapper for build_site."""
    return asyncio.run(build_site(source_dir, output_dir, output_format, settings))
