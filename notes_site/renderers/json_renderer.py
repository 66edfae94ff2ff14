"""JSON renderer: dumps the parsed structure of each note."""

from __future__ import annotations

import json
from collections.abc import Sequence

from ..models import CrossReference
from ..models import Document
from ..models import Section
from .base import Renderer


def _string_keys(value):
    """Copy ``value`` with every mapping key converted to a string."""
    if isinstance(value, dict):
        return {str(key): _string_keys(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_string_keys(item) for item in value]
    return value


def _dumps(payload: dict) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False, default=str) + "\n"


class JsonRenderer(Renderer):
    name = "json"
    extension = "json"

    def render(
        self,
        document: Document,
        sections: Sequence[Section],
        related: Sequence[str] | None = None,
    ) -> str:
        return _dumps(
            {
                "identifier": document.identifier,
                "title": document.title,
                "metadata": _string_keys(document.metadata),
                "related": list(document.related if related is None else related),
                "sections": [section.model_dump(mode="json") for section in sections],
            }
        )

    def render_index(
        self,
        title: str,
        documents: Sequence[Document],
        edges: Sequence[CrossReference] = (),
    ) -> str:
        return _dumps(
            {
                "title": title,
                "documents": [
                    {
                        "identifier": document.identifier,
                        "title": document.title,
                        "path": self.output_path(document.identifier),
                    }
                    for document in sorted(documents, key=lambda d: d.identifier)
                ],
                "edges": [list(edge.pair) for edge in edges],
            }
        )
