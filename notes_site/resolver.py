"""Cross-reference resolution.

Builds the undirected "related" graph between loaded Documents. The graph
is recomputed from scratch on every call and documents and relations are
visited in sorted order, so resolving the same set twice yields the same
edges and the same warnings in the same order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field

from .exceptions import DanglingReferenceWarning
from .exceptions import SelfReferenceError
from .logger_config import ErrorCategory
from .logger_config import log_structured_error
from .logger_config import pipeline_logger
from .models import CrossReference
from .models import Document


@dataclass
class ReferenceGraph:
    """Resolved cross-references plus the problems found while resolving."""

    nodes: tuple[str, ...] = ()
    edges: tuple[CrossReference, ...] = ()
    warnings: list[DanglingReferenceWarning] = field(default_factory=list)
    errors: list[SelfReferenceError] = field(default_factory=list)

    @property
    def edge_set(self) -> frozenset[CrossReference]:
        return frozenset(self.edges)

    def neighbours(self, identifier: str) -> list[str]:
        """Identifiers related to ``identifier``, sorted."""
        return sorted(edge.other(identifier) for edge in self.edges if identifier in edge.pair)

    def adjacency(self) -> dict[str, list[str]]:
        adjacency: dict[str, list[str]] = {node: [] for node in self.nodes}
        for edge in self.edges:
            adjacency[edge.source].append(edge.target)
            adjacency[edge.target].append(edge.source)
        return {node: sorted(targets) for node, targets in adjacency.items()}

    def components(self) -> list[list[str]]:
        """Connected groups of related documents, largest first."""
        adjacency = self.adjacency()
        seen: set[str] = set()
        groups = []
        for node in self.nodes:
            if node in seen:
                continue
            stack, group = [node], []
            seen.add(node)
            while stack:
                current = stack.pop()
                group.append(current)
                for neighbour in adjacency[current]:
                    if neighbour not in seen:
                        seen.add(neighbour)
                        stack.append(neighbour)
            groups.append(sorted(group))
        return sorted(groups, key=lambda group: (-len(group), group))

    def cycle_edges(self) -> list[CrossReference]:
        """Edges that close an undirected cycle, in edge order.

        Uses union-find over the sorted edge list; an edge whose ends are
        already connected closes a cycle.
        """
        parent = {node: node for node in self.nodes}

        def find(node: str) -> str:
            while parent[node] != node:
                parent[node] = parent[parent[node]]
                node = parent[node]
            return node

        closing = []
        for edge in self.edges:
            root_a, root_b = find(edge.source), find(edge.target)
            if root_a == root_b:
                closing.append(edge)
            else:
                parent[root_b] = root_a
        return closing

    @property
    def issues(self) -> list[SelfReferenceError | DanglingReferenceWarning]:
        return [*self.errors, *self.warnings]


def resolve_references(documents: Iterable[Document]) -> ReferenceGraph:
    """Resolve every declared relation into an undirected edge set.

    - a relation to the declaring document itself records a
      ``SelfReferenceError`` and adds no edge
    - a relation to an identifier not in ``documents`` records a
      ``DanglingReferenceWarning`` and adds no edge
    - mutual declarations (A relates B, B relates A) produce one edge
    """
    by_id = {document.identifier: document for document in documents}
    edges: set[CrossReference] = set()
    graph = ReferenceGraph(nodes=tuple(sorted(by_id)))

    for identifier in graph.nodes:
        for target in sorted(set(by_id[identifier].related)):
            if target == identifier:
                error = SelfReferenceError(identifier)
                graph.errors.append(error)
                log_structured_error(
                    category=ErrorCategory.ERROR,
                    message=error.message,
                    context=error.details,
                    operation="resolve_references",
                )
            elif target not in by_id:
                warning = DanglingReferenceWarning(identifier, target)
                graph.warnings.append(warning)
                log_structured_error(
                    category=ErrorCategory.WARNING,
                    message=warning.message,
                    context=warning.details,
                    operation="resolve_references",
                )
            else:
                edges.add(CrossReference.between(identifier, target))

    graph.edges = tuple(sorted(edges, key=lambda edge: edge.pair))
    pipeline_logger.info(
        f"Resolved {len(graph.edges)} cross-references across {len(graph.nodes)} documents "
        f"({len(graph.warnings)} dangling, {len(graph.errors)} self-references)"
    )
    return graph
