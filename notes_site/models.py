"""Pydantic models for the Notes Site pipeline.

This module contains the data records passed between pipeline stages:
loaded documents, parsed sections and their blocks, derived
cross-references, rendered artifacts and the final build report.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

# === Source Models ===


class Document(BaseModel):
    """One loaded note. Immutable after load."""

    model_config = ConfigDict(frozen=True)

    identifier: str  # Path-like, e.g. "angular/template-variables"
    lines: tuple[str, ...] = ()  # Body lines, frontmatter excluded
    related: tuple[str, ...] = ()  # Declared related identifiers, normalised and de-duplicated
    metadata: dict[Any, Any] = Field(default_factory=dict)  # Frontmatter as parsed; YAML keys need not be strings
    source_path: str | None = None
    body_start_line: int = 1  # 1-based source line of lines[0]

    @property
    def title(self) -> str:
        """Frontmatter title, falling back to the identifier's last segment."""
        title = self.metadata.get("title")
        if isinstance(title, str) and title.strip():
            return title.strip()
        return self.identifier.rsplit("/", 1)[-1]


# === Parsed Structure Models ===


class BlockKind(str, Enum):
    PARAGRAPH = "paragraph"
    LIST = "list"
    CODE = "code"
    QUOTE = "quote"
    RULE = "rule"


class Block(BaseModel):
    """A run of content inside a section."""

    model_config = ConfigDict(frozen=True)

    kind: BlockKind
    lines: tuple[str, ...] = ()
    line_number: int  # 1-based source line where the block starts
    language: str | None = None  # Code blocks only; free-form, unvalidated
    fence: str | None = None  # Code blocks only, e.g. "```"
    terminated: bool = True  # False for a code fence closed by end of document

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class Section(BaseModel):
    """A heading-delimited portion of exactly one document."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    index: int  # Position within the document, 0-based
    level: int = Field(ge=1, le=6)
    title: str
    anchor: str  # Unique within the document
    parent: int | None = None  # Index of the enclosing section
    line_number: int
    blocks: tuple[Block, ...] = ()
    implicit: bool = False  # Content before the first heading

    @property
    def code_blocks(self) -> list[Block]:
        return [block for block in self.blocks if block.kind is BlockKind.CODE]


class OutlineNode(BaseModel):
    """A section with its nested subsections, for tables of contents."""

    section: Section
    children: list["OutlineNode"] = Field(default_factory=list)


# === Graph Models ===


class CrossReference(BaseModel):
    """Unordered "related" pair of two document identifiers.

    Stored in sorted order so the pair compares and hashes the same no
    matter which document declared it.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    target: str

    @model_validator(mode="before")
    @classmethod
    def canonical_order(cls, data: Any) -> Any:
        if isinstance(data, dict) and "source" in data and "target" in data:
            first, second = sorted((data["source"], data["target"]))
            data = {**data, "source": first, "target": second}
        return data

    @classmethod
    def between(cls, first: str, second: str) -> "CrossReference":
        return cls(source=first, target=second)

    @property
    def pair(self) -> tuple[str, str]:
        return (self.source, self.target)

    def other(self, identifier: str) -> str:
        """Return the end of the edge that is not ``identifier``."""
        return self.target if identifier == self.source else self.source


# === Output Models ===


class RenderedArtifact(BaseModel):
    """One rendered output file."""

    document_id: str
    output_format: str
    path: str  # Relative to the output root
    content: str


class BuildReport(BaseModel):
    """Aggregated result of a pipeline run."""

    source: str
    output_dir: str | None = None
    output_format: str
    documents: list[str] = []
    artifacts: list[str] = []
    edges: list[tuple[str, str]] = []
    issues: list[dict[str, Any]] = []

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.get("severity") == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.get("severity") == "warning")

    @property
    def success(self) -> bool:
        return self.error_count == 0

    def issues_of(self, error_type: str) -> list[dict[str, Any]]:
        return [issue for issue in self.issues if issue.get("error_type") == error_type]
