"""Category and text-search filtering of the canonical graph.

The engine is stateless: every call is computed from the full graph it is
given, so the same criteria always produce the same visible set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from graph_view.classifier import category_for_labels

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping, Sequence

    from graph_view.node import GraphType, Node, Relationship


DEFAULT_SEARCH_PROPERTIES: tuple[str, ...] = (
    "id",
    "name",
    "fileName",
    "title",
    "text",
    "description",
)


class FilterStatus(str, Enum):
    """Why the visible set looks the way it does.

    - ok: At least one node is visible
    - empty_graph: There was nothing to filter
    - nothing_selected: No category is active
    - no_matches: The active categories and query eliminated every node
    """

    OK = "ok"
    EMPTY_GRAPH = "empty_graph"
    NOTHING_SELECTED = "nothing_selected"
    NO_MATCHES = "no_matches"


@dataclass(frozen=True)
class FilterResult:
    """Visible subset handed to the rendering widget.

    Attributes:
        nodes: Visible nodes, in canonical order
        relationships: Relationships with both endpoints visible
        scheme: Scheme restricted to labels of visible nodes (legend)
        status: Explains an empty result
    """

    nodes: tuple[Node, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    scheme: dict[str, str] = field(default_factory=dict)
    status: FilterStatus = FilterStatus.OK

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]


class FilterEngine:
    """Computes the visible node and relationship sets."""

    def __init__(
        self,
        search_properties: Sequence[str] = DEFAULT_SEARCH_PROPERTIES,
        require_category: bool = True,
    ) -> None:
        """Initialize the filter engine.

        Args:
            search_properties: Node properties searched besides id and caption
            require_category: An empty category set hides everything when True,
                and applies no category constraint when False
        """
        self.search_properties = tuple(search_properties)
        self.require_category = require_category

    def matches_query(self, node: Node, needle: str) -> bool:
        """Case-insensitive substring match on caption, id and search properties.

        Args:
            node: Node to test
            needle: Lower-cased, stripped query

        Returns:
            True if any searched field contains the query
        """
        if needle in node.caption.lower() or needle in node.id.lower():
            return True

        for name in self.search_properties:
            value = node.properties.get(name)
            if value is not None and needle in str(value).lower():
                return True

        return False

    @staticmethod
    def is_selected(node: Node, active: Collection[GraphType | str]) -> bool:
        """A node is selected by its category or by its primary label."""
        if category_for_labels(node.labels) in active:
            return True
        return node.primary_label is not None and node.primary_label in active

    def apply(
        self,
        categories: Collection[GraphType | str],
        nodes: Iterable[Node],
        relationships: Iterable[Relationship],
        scheme: Mapping[str, str],
        query: str | None = None,
    ) -> FilterResult:
        """Filter a graph by active categories and a search query.

        Args:
            categories: Active categories, or primary labels such as "Chunk"
                to select a single label within a category
            nodes: Full canonical node set
            relationships: Full canonical relationship set
            scheme: Label -> color mapping of the canonical graph
            query: Optional free-text search

        Returns:
            FilterResult with the visible subset and its status
        """
        nodes = tuple(nodes)
        if not nodes:
            return FilterResult(status=FilterStatus.EMPTY_GRAPH)

        active = set(categories)
        if not active and self.require_category:
            return FilterResult(status=FilterStatus.NOTHING_SELECTED)

        visible = nodes
        if active:
            visible = tuple(
                node for node in visible if self.is_selected(node, active)
            )

        needle = (query or "").strip().lower()
        if needle:
            visible = tuple(node for node in visible if self.matches_query(node, needle))

        if not visible:
            return FilterResult(status=FilterStatus.NO_MATCHES)

        visible_ids = {node.id for node in visible}
        visible_relationships = tuple(
            rel
            for rel in relationships
            if rel.from_id in visible_ids and rel.to_id in visible_ids
        )

        visible_labels = {label for node in visible for label in node.labels}
        visible_scheme = {
            label: color for label, color in scheme.items() if label in visible_labels
        }

        return FilterResult(
            nodes=visible,
            relationships=visible_relationships,
            scheme=visible_scheme,
            status=FilterStatus.OK,
        )

    def __repr__(self) -> str:
        return f"FilterEngine(properties={len(self.search_properties)}, require_category={self.require_category})"
