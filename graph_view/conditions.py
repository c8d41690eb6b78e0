"""Enablement conditions for the category checkboxes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph_view.classifier import CATEGORY_ORDER, graph_types_from_nodes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graph_view.node import GraphType, Node


def checkbox_conditions(nodes: Iterable[Node]) -> dict[GraphType, bool]:
    """Report, for every known category, whether any node of it exists.

    Args:
        nodes: Canonical node set

    Returns:
        Dictionary with one entry per GraphType
    """
    present = set(graph_types_from_nodes(nodes))
    return {graph_type: graph_type in present for graph_type in CATEGORY_ORDER}


def disabled_categories(nodes: Iterable[Node]) -> set[GraphType]:
    """Categories whose toggle should be disabled because no node has them."""
    return {
        graph_type
        for graph_type, present in checkbox_conditions(nodes).items()
        if not present
    }
