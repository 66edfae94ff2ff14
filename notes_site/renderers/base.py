"""Renderer interface.

A renderer is a pure function of its inputs: the same Document, Sections
and related identifiers always produce byte-identical output.
"""

from __future__ import annotations

import posixpath
from abc import ABC
from abc import abstractmethod
from collections.abc import Collection
from collections.abc import Sequence

from ..models import CrossReference
from ..models import Document
from ..models import RenderedArtifact
from ..models import Section


class Renderer(ABC):
    """Base class for output formats."""

    name: str = ""
    extension: str = ""

    def output_path(self, identifier: str) -> str:
        """Artifact path for a document, relative to the output root."""
        return f"{identifier}.{self.extension}"

    def index_path(self, taken: Collection[str] = ()) -> str:
        """Path of the site index, suffixed past any path in ``taken``."""
        path = f"index.{self.extension}"
        counter = 0
        while path in taken:
            counter += 1
            path = f"index-{counter}.{self.extension}"
        return path

    def link(self, from_identifier: str, to_identifier: str) -> str:
        """Relative link from one document's artifact to another's."""
        start = posixpath.dirname(self.output_path(from_identifier)) or "."
        return posixpath.relpath(self.output_path(to_identifier), start)

    @abstractmethod
    def render(
        self,
        document: Document,
        sections: Sequence[Section],
        related: Sequence[str] | None = None,
    ) -> str:
        """Render one document.

        Args:
            document: The loaded document
            sections: Its parsed sections, in order
            related: Resolved related identifiers; defaults to the
                document's declared relations
        """

    @abstractmethod
    def render_index(
        self,
        title: str,
        documents: Sequence[Document],
        edges: Sequence[CrossReference] = (),
    ) -> str:
        """Render the index listing every document."""

    def artifact(
        self,
        document: Document,
        sections: Sequence[Section],
        related: Sequence[str] | None = None,
    ) -> RenderedArtifact:
        return RenderedArtifact(
            document_id=document.identifier,
            output_format=self.name,
            path=self.output_path(document.identifier),
            content=self.render(document, sections, related),
        )
