"""Label classification into graph categories.

Maps node labels onto the GraphType categories that drive the filter toggles.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph_view.node import GraphType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from graph_view.node import Node


DOCUMENT_LABEL = "Document"
CHUNK_LABEL = "Chunk"
COMMUNITY_LABEL = "__Community__"

# Category -> labels that select it
# Format: checked in this order, first match wins, ENTITIES catches the rest
CATEGORY_LABELS: Mapping[GraphType, frozenset[str]] = {
    GraphType.DOCUMENT_CHUNK: frozenset({DOCUMENT_LABEL, CHUNK_LABEL}),
    GraphType.COMMUNITIES: frozenset({COMMUNITY_LABEL}),
}

# Fixed output order for category sets
CATEGORY_ORDER: tuple[GraphType, ...] = tuple(GraphType)


def category_for_labels(labels: Sequence[str]) -> GraphType | None:
    """Classify a label list into a single category.

    Args:
        labels: Ordered node labels

    Returns:
        The category, or None for a node without labels
    """
    if not labels:
        return None

    for graph_type, selecting in CATEGORY_LABELS.items():
        if any(label in selecting for label in labels):
            return graph_type

    return GraphType.ENTITIES


def category_for_node(node: Node) -> GraphType | None:
    """Classify a normalized node."""
    return category_for_labels(node.labels)


def graph_types_from_labels(label_lists: Iterable[Sequence[str]]) -> list[GraphType]:
    """Collect the distinct categories for a collection of label lists.

    Args:
        label_lists: One label list per node

    Returns:
        Categories present, in CATEGORY_ORDER
    """
    present = {category_for_labels(labels) for labels in label_lists}
    return [graph_type for graph_type in CATEGORY_ORDER if graph_type in present]


def graph_types_from_nodes(nodes: Iterable[Node]) -> list[GraphType]:
    """Collect the distinct categories present in a node collection.

    Args:
        nodes: Normalized nodes

    Returns:
        Categories present, in CATEGORY_ORDER (empty for empty input)
    """
    return graph_types_from_labels(node.labels for node in nodes)
