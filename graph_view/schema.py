"""Schema summary of a graph.

Compresses an instance graph into one node per label and one relationship
per relationship type, for the schema overview mode.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from graph_view.node import Node, Relationship
from graph_view.normalizer import UNLABELED_COLOR

if TYPE_CHECKING:
    from collections.abc import Iterable


SCHEMA_ID_PREFIX = "schema:"


@dataclass(frozen=True)
class SchemaSummary:
    """Reduced graph with one node per label and one relationship per type."""

    nodes: tuple[Node, ...] = ()
    relationships: tuple[Relationship, ...] = ()


def schema_node_id(label: str) -> str:
    return f"{SCHEMA_ID_PREFIX}{label}"


def extract_schema(
    nodes: Iterable[Node],
    relationships: Iterable[Relationship],
) -> SchemaSummary:
    """Build the schema summary of a graph.

    The first node seen with a given primary label represents that label and
    lends it its color. The first relationship seen with a given type, whose
    endpoint labels are both represented, represents that type.

    Args:
        nodes: Nodes to summarize (canonical or filtered)
        relationships: Relationships to summarize

    Returns:
        SchemaSummary whose size depends only on distinct labels and types
    """
    representatives: dict[str, Node] = {}
    label_counts: Counter[str] = Counter()
    label_by_node: dict[str, str] = {}

    for node in nodes:
        label = node.primary_label
        if label is None:
            continue
        label_by_node[node.id] = label
        label_counts[label] += 1
        representatives.setdefault(label, node)

    schema_nodes = tuple(
        Node(
            id=schema_node_id(label),
            labels=[label],
            caption=label,
            properties={"count": label_counts[label]},
            color=node.color or UNLABELED_COLOR,
            size=node.size,
            icon=node.icon,
        )
        for label, node in representatives.items()
    )

    type_representatives: dict[str, tuple[str, str]] = {}
    type_counts: Counter[str] = Counter()

    for rel in relationships:
        from_label = label_by_node.get(rel.from_id)
        to_label = label_by_node.get(rel.to_id)
        if from_label is None or to_label is None:
            continue
        type_counts[rel.type] += 1
        type_representatives.setdefault(rel.type, (from_label, to_label))

    schema_relationships = tuple(
        Relationship(
            id=f"{SCHEMA_ID_PREFIX}{rel_type}",
            type=rel_type,
            from_id=schema_node_id(from_label),
            to_id=schema_node_id(to_label),
            properties={"count": type_counts[rel_type]},
        )
        for rel_type, (from_label, to_label) in type_representatives.items()
    )

    return SchemaSummary(nodes=schema_nodes, relationships=schema_relationships)
