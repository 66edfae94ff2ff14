"""Section parsing.

Splits a Document's body into heading-delimited Sections, each holding an
ordered run of blocks (paragraphs, lists, quotes, rules, fenced code).

The scanner has two states: outside a code fence and inside one. Inside a
fence every line is code until a closing fence of the same character and at
least the same length. A fence still open at end of document is closed
there and reported as a ``MalformedCodeBlockError`` instead of raising.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field

from .exceptions import MalformedCodeBlockError
from .logger_config import ErrorCategory
from .logger_config import log_structured_error
from .models import Block
from .models import BlockKind
from .models import Document
from .models import OutlineNode
from .models import Section
from .utils.identifiers import slugify

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
FENCE_OPEN_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*([^`\s]*)?.*$")
LIST_ITEM_PATTERN = re.compile(r"^ {0,3}(?:[-*+]|\d{1,9}[.)])(?:[ \t]+|$)")
QUOTE_PATTERN = re.compile(r"^ {0,3}>")
RULE_PATTERN = re.compile(r"^ {0,3}(?:(?:-[ \t]*){3,}|(?:\*[ \t]*){3,}|(?:_[ \t]*){3,})$")

OUTSIDE_CODE = "outside-code"
INSIDE_CODE = "inside-code"


def _closes_fence(line: str, fence: str) -> bool:
    stripped = line.strip()
    return (
        len(line) - len(line.lstrip(" ")) <= 3
        and len(stripped) >= len(fence)
        and set(stripped) == {fence[0]}
    )


class _SectionBuilder:
    """Accumulates blocks for the section currently being scanned."""

    def __init__(self, document: Document):
        self.document = document
        self.index = 0
        self.anchors: dict[str, int] = {}
        self.parents: list[tuple[int, int]] = []  # (level, index) of open ancestors
        self._reset(level=1, title=document.title, line_number=document.body_start_line, implicit=True)

    def _reset(self, level: int, title: str, line_number: int, implicit: bool = False) -> None:
        self.level = level
        self.title = title
        self.line_number = line_number
        self.implicit = implicit
        self.blocks: list[Block] = []

    def _anchor(self, title: str) -> str:
        base = slugify(title)
        count = self.anchors.get(base, 0)
        self.anchors[base] = count + 1
        return base if count == 0 else f"{base}-{count}"

    def add_block(self, block: Block) -> None:
        self.blocks.append(block)

    def finish(self) -> Section | None:
        """Emit the current section; an empty implicit preamble is dropped."""
        if self.implicit and not self.blocks:
            return None
        while self.parents and self.parents[-1][0] >= self.level:
            self.parents.pop()
        parent = self.parents[-1][1] if self.parents else None
        section = Section(
            document_id=self.document.identifier,
            index=self.index,
            level=self.level,
            title=self.title,
            anchor=self._anchor(self.title),
            parent=parent,
            line_number=self.line_number,
            blocks=tuple(self.blocks),
            implicit=self.implicit,
        )
        self.parents.append((self.level, self.index))
        self.index += 1
        return section

    def start(self, level: int, title: str, line_number: int) -> None:
        self._reset(level, title, line_number)


def _scan(document: Document, issues: list[MalformedCodeBlockError]) -> Iterator[Section]:
    builder = _SectionBuilder(document)
    state = OUTSIDE_CODE
    pending_kind: BlockKind | None = None
    pending: list[str] = []
    pending_start = 0
    fence = ""
    language: str | None = None

    def flush() -> None:
        nonlocal pending_kind, pending
        while pending and not pending[-1].strip():
            pending.pop()
        if pending_kind is not None:
            builder.add_block(Block(kind=pending_kind, lines=tuple(pending), line_number=pending_start))
        pending_kind, pending = None, []

    def extend(kind: BlockKind, line: str, line_number: int) -> None:
        nonlocal pending_kind, pending_start
        if pending_kind is not kind:
            flush()
            pending_kind, pending_start = kind, line_number
        pending.append(line)

    for offset, line in enumerate(document.lines):
        line_number = document.body_start_line + offset

        if state == INSIDE_CODE:
            if _closes_fence(line, fence):
                builder.add_block(
                    Block(
                        kind=BlockKind.CODE,
                        lines=tuple(pending),
                        line_number=pending_start,
                        language=language,
                        fence=fence,
                    )
                )
                pending, state = [], OUTSIDE_CODE
            else:
                pending.append(line)
            continue

        fence_match = FENCE_OPEN_PATTERN.match(line)
        if fence_match:
            flush()
            fence = fence_match.group(1)
            language = fence_match.group(2) or None
            pending, pending_start, state = [], line_number, INSIDE_CODE
            continue

        heading = HEADING_PATTERN.match(line)
        if heading:
            flush()
            section = builder.finish()
            if section is not None:
                yield section
            builder.start(len(heading.group(1)), (heading.group(2) or "").strip(), line_number)
            continue

        if not line.strip():
            # Blank lines end paragraphs and quotes; lists continue across them
            if pending_kind is not BlockKind.LIST:
                flush()
            elif pending:
                pending.append(line)
        elif RULE_PATTERN.match(line):
            flush()
            builder.add_block(Block(kind=BlockKind.RULE, lines=(line,), line_number=line_number))
        elif QUOTE_PATTERN.match(line):
            extend(BlockKind.QUOTE, line, line_number)
        elif LIST_ITEM_PATTERN.match(line):
            extend(BlockKind.LIST, line, line_number)
        elif pending_kind is BlockKind.LIST and (line.startswith((" ", "\t")) or (pending and pending[-1].strip())):
            # Indented continuation or lazy continuation of a list item
            pending.append(line)
        else:
            extend(BlockKind.PARAGRAPH, line, line_number)

    if state == INSIDE_CODE:
        issue = MalformedCodeBlockError(document.identifier, pending_start, fence, language)
        issues.append(issue)
        log_structured_error(
            category=ErrorCategory.WARNING,
            message=issue.message,
            context=issue.details,
            operation="parse_sections",
        )
        builder.add_block(
            Block(
                kind=BlockKind.CODE,
                lines=tuple(pending),
                line_number=pending_start,
                language=language,
                fence=fence,
                terminated=False,
            )
        )
        pending = []
    else:
        flush()

    section = builder.finish()
    if section is not None:
        yield section


class SectionOutline:
    """Lazy, restartable sequence of a Document's Sections.

    Each iteration scans the document from the start. ``issues`` holds the
    problems found by the most recent complete or partial scan.
    """

    def __init__(self, document: Document):
        self.document = document
        self.issues: list[MalformedCodeBlockError] = []

    def __iter__(self) -> Iterator[Section]:
        self.issues = []
        return _scan(self.document, self.issues)

    def __repr__(self) -> str:
        return f"SectionOutline({self.document.identifier!r})"


def iter_sections(document: Document) -> Iterator[Section]:
    """Iterate a Document's Sections lazily."""
    return iter(SectionOutline(document))


@dataclass
class ParsedDocument:
    """A Document together with its fully parsed Sections."""

    document: Document
    sections: list[Section] = field(default_factory=list)
    issues: list[MalformedCodeBlockError] = field(default_factory=list)


def parse_document(document: Document) -> ParsedDocument:
    """Parse every Section of a Document eagerly."""
    outline = SectionOutline(document)
    sections = list(outline)
    return ParsedDocument(document=document, sections=sections, issues=list(outline.issues))


def build_tree(sections: list[Section]) -> list[OutlineNode]:
    """Nest Sections under their parents for a table of contents."""
    nodes = {section.index: OutlineNode(section=section) for section in sections}
    roots: list[OutlineNode] = []
    for section in sections:
        node = nodes[section.index]
        if section.parent is not None and section.parent in nodes:
            nodes[section.parent].children.append(node)
        else:
            roots.append(node)
    return roots
