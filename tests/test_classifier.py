"""Tests for label classification and checkbox conditions."""

from graph_view.classifier import (
    category_for_labels,
    graph_types_from_labels,
    graph_types_from_nodes,
)
from graph_view.conditions import checkbox_conditions, disabled_categories
from graph_view.node import GraphType, Node


def test_document_and_chunk_labels():
    """Test structural labels map to the document/chunk category."""
    assert category_for_labels(["Document"]) == GraphType.DOCUMENT_CHUNK
    assert category_for_labels(["Chunk"]) == GraphType.DOCUMENT_CHUNK


def test_community_label():
    """Test community nodes get their own category."""
    assert category_for_labels(["__Community__"]) == GraphType.COMMUNITIES


def test_other_labels_are_entities():
    """Test any other label is an entity."""
    assert category_for_labels(["Person", "__Entity__"]) == GraphType.ENTITIES


def test_unlabeled_node_has_no_category():
    """Test empty label lists are unclassified."""
    assert category_for_labels([]) is None


def test_precedence_for_ambiguous_labels():
    """Test document/chunk wins over community, community over entities."""
    assert category_for_labels(["Custom", "Document"]) == GraphType.DOCUMENT_CHUNK
    assert category_for_labels(["Custom", "__Community__"]) == GraphType.COMMUNITIES
    assert category_for_labels(["__Community__", "Chunk"]) == GraphType.DOCUMENT_CHUNK


def test_graph_types_fixed_order():
    """Test categories come out in enum order regardless of input order."""
    forward = graph_types_from_labels([["Person"], ["__Community__"], ["Chunk"]])
    backward = graph_types_from_labels([["Chunk"], ["__Community__"], ["Person"]])

    assert forward == backward
    assert forward == [GraphType.DOCUMENT_CHUNK, GraphType.ENTITIES, GraphType.COMMUNITIES]


def test_graph_types_empty_input():
    """Test empty input yields no categories."""
    assert graph_types_from_nodes([]) == []


def test_graph_types_ignores_unlabeled():
    """Test unlabeled nodes add no category."""
    nodes = [Node(id="1"), Node(id="2", labels=["Person"])]
    assert graph_types_from_nodes(nodes) == [GraphType.ENTITIES]


def test_checkbox_conditions():
    """Test one flag per known category."""
    nodes = [Node(id="1", labels=["Document"]), Node(id="2", labels=["Person"])]

    conditions = checkbox_conditions(nodes)
    assert set(conditions) == set(GraphType)
    assert conditions[GraphType.DOCUMENT_CHUNK] is True
    assert conditions[GraphType.ENTITIES] is True
    assert conditions[GraphType.COMMUNITIES] is False


def test_disabled_categories():
    """Test absent categories are disabled."""
    nodes = [Node(id="1", labels=["Chunk"])]
    assert disabled_categories(nodes) == {GraphType.ENTITIES, GraphType.COMMUNITIES}
    assert disabled_categories([]) == set(GraphType)
