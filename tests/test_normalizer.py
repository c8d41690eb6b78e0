"""Tests for GraphNormalizer class."""

import pytest

from graph_view.node import GraphType
from graph_view.normalizer import (
    UNLABELED_COLOR,
    CanonicalGraph,
    GraphNormalizer,
    truncate,
)
from graph_view.scheme import DEFAULT_PALETTE


@pytest.fixture
def normalizer():
    return GraphNormalizer()


@pytest.fixture
def doc_chunk_graph():
    """One document with one chunk."""
    nodes = [
        {"id": "1", "labels": ["Document"], "properties": {"fileName": "a.pdf"}},
        {"id": "2", "labels": ["Chunk"], "properties": {"text": "..."}},
    ]
    relationships = [{"id": "r1", "type": "HAS_CHUNK", "from": "1", "to": "2"}]
    return nodes, relationships


def test_normalize_document_and_chunk(normalizer, doc_chunk_graph):
    """Test the basic document/chunk scenario."""
    graph = normalizer.normalize(*doc_chunk_graph)

    assert len(graph.nodes) == 2
    assert len(graph.relationships) == 1
    assert graph.scheme["Document"] != graph.scheme["Chunk"]

    doc = graph.get_node("1")
    assert doc.caption == "a.pdf"
    assert doc.color == graph.scheme["Document"]
    assert doc.size == 40
    assert doc.icon == "document"

    rel = graph.get_relationship("r1")
    assert (rel.from_id, rel.to_id, rel.type) == ("1", "2", "HAS_CHUNK")


def test_duplicate_nodes_merge_properties(normalizer):
    """Test duplicates by ID union their properties."""
    nodes = [
        {"id": "e1", "labels": ["Person"], "properties": {"id": "Tim Cook"}},
        {"id": "e1", "labels": ["Person"], "properties": {"role": "CEO"}},
    ]

    graph = normalizer.normalize(nodes, [])

    assert len(graph.nodes) == 1
    assert graph.nodes[0].properties == {"id": "Tim Cook", "role": "CEO"}
    assert graph.report.merged_nodes == 1


def test_duplicate_nodes_later_wins(normalizer):
    """Test later records override overlapping keys."""
    nodes = [
        {"id": "e1", "labels": ["Person"], "properties": {"id": "Tim", "age": 1}},
        {"id": "e1", "labels": ["Person", "__Entity__"], "properties": {"age": 2}},
    ]

    graph = normalizer.normalize(nodes, [])

    node = graph.nodes[0]
    assert node.properties == {"id": "Tim", "age": 2}
    assert node.labels == ["Person", "__Entity__"]


def test_duplicate_keeps_first_label_order(normalizer):
    """Test identity and primary label come from the first record."""
    nodes = [
        {"id": "x", "labels": ["Person"]},
        {"id": "y", "labels": ["Place"]},
        {"id": "x", "labels": ["Place", "Person"]},
    ]

    graph = normalizer.normalize(nodes, [])

    assert [node.id for node in graph.nodes] == ["x", "y"]
    assert graph.get_node("x").primary_label == "Person"
    assert graph.get_node("x").color == graph.scheme["Person"]


def test_dangling_relationship_dropped(normalizer):
    """Test a relationship to a missing node is dropped."""
    nodes = [{"id": "1", "labels": ["Document"]}]
    relationships = [{"id": "r1", "type": "HAS_CHUNK", "from": "1", "to": "missing"}]

    graph = normalizer.normalize(nodes, relationships)

    assert len(graph.nodes) == 1
    assert graph.relationships == ()
    assert graph.report.dangling_relationships == 1


def test_duplicate_relationships_deduped(normalizer, doc_chunk_graph):
    """Test relationships are unique by ID."""
    nodes, relationships = doc_chunk_graph
    graph = normalizer.normalize(nodes, relationships + relationships)
    assert len(graph.relationships) == 1


def test_malformed_records_skipped(normalizer):
    """Test malformed records are skipped without raising."""
    nodes = [
        {"labels": ["Document"]},
        {"id": "", "labels": ["Document"]},
        "not a node",
        None,
        {"id": "ok", "labels": ["Document"]},
    ]
    relationships = [
        {"id": "r1", "type": "X", "from": "ok"},
        {"type": "X", "from": "ok", "to": "ok"},
        {"id": "r2", "from": "ok", "to": "ok"},
    ]

    graph = normalizer.normalize(nodes, relationships)

    assert [node.id for node in graph.nodes] == ["ok"]
    assert graph.relationships == ()
    assert graph.report.skipped_nodes == 4
    assert graph.report.skipped_relationships == 3
    assert graph.report.dropped == 7


def test_backend_field_names(normalizer):
    """Test element_id and start/end node field names are accepted."""
    nodes = [
        {"element_id": "4:a:1", "labels": ["Document"], "properties": {"fileName": "a.pdf"}},
        {"element_id": "4:a:2", "labels": ["Chunk"], "properties": {"text": "hello"}},
    ]
    relationships = [{
        "element_id": "5:a:1",
        "type": "PART_OF",
        "start_node_element_id": "4:a:2",
        "end_node_element_id": "4:a:1",
    }]

    graph = normalizer.normalize(nodes, relationships)

    assert len(graph.nodes) == 2
    assert graph.relationships[0].from_id == "4:a:2"


def test_integer_ids_coerced(normalizer):
    """Test integer identifiers become strings."""
    graph = normalizer.normalize(
        [{"id": 1, "labels": ["A"]}, {"id": 2, "labels": ["A"]}],
        [{"id": 10, "type": "R", "from": 1, "to": 2}],
    )
    assert graph.get_node("1") is not None
    assert graph.relationships[0].id == "10"


def test_caption_fallbacks(normalizer):
    """Test caption candidates are tried in order, then the ID."""
    graph = normalizer.normalize(
        [
            {"id": "d", "labels": ["Document"], "properties": {"fileName": "", "title": "Report"}},
            {"id": "e", "labels": ["Person"], "properties": {"name": "Ada"}},
            {"id": "nothing-here", "labels": ["Person"], "properties": {}},
            {"id": "c", "labels": ["__Community__"], "properties": {"title": "Tech"}},
        ],
        [],
    )

    assert graph.get_node("d").caption == "Report"
    assert graph.get_node("e").caption == "Ada"
    assert graph.get_node("nothing-here").caption == "nothing-here"
    assert graph.get_node("c").caption == "Tech"


def test_caption_truncated():
    """Test long captions and IDs are truncated."""
    normalizer = GraphNormalizer(caption_max_length=10)
    graph = normalizer.normalize(
        [
            {"id": "c", "labels": ["Chunk"], "properties": {"text": "a" * 50}},
            {"id": "x" * 50, "labels": ["Person"]},
        ],
        [],
    )

    assert graph.get_node("c").caption == "a" * 9 + "…"
    assert graph.get_node("x" * 50).caption == "x" * 9 + "…"


def test_truncate():
    """Test truncate helper."""
    assert truncate("short", 10) == "short"
    assert truncate("abcdef", 4) == "abc…"
    assert truncate("abcdef", 0) == "abcdef"


def test_unlabeled_node_gets_fallback_color(normalizer):
    """Test nodes without labels are kept with a neutral color."""
    graph = normalizer.normalize([{"id": "1"}], [])
    assert graph.nodes[0].color == UNLABELED_COLOR
    assert graph.scheme == {}


def test_community_size_grows_with_weight(normalizer):
    """Test community size hints."""
    graph = normalizer.normalize(
        [
            {"id": "c1", "labels": ["__Community__"], "properties": {"weight": 5}},
            {"id": "c2", "labels": ["__Community__"], "properties": {"weight": 500}},
            {"id": "c3", "labels": ["__Community__"], "properties": {"weight": "heavy"}},
        ],
        [],
    )
    assert graph.get_node("c1").size == 35
    assert graph.get_node("c2").size == 50
    assert graph.get_node("c3").size == 30


def test_scheme_threaded_across_passes(normalizer):
    """Test a second pass keeps the colors of the first."""
    first = normalizer.normalize([{"id": "1", "labels": ["Document"]}], [])
    second = normalizer.normalize(
        [{"id": "2", "labels": ["Person"]}, {"id": "3", "labels": ["Document"]}],
        [],
        first.scheme,
    )

    assert second.scheme["Document"] == first.scheme["Document"]
    assert second.get_node("3").color == first.get_node("1").color
    assert second.scheme["Person"] == DEFAULT_PALETTE[1]
    assert first.scheme == {"Document": DEFAULT_PALETTE[0]}


def test_secondary_labels_enter_scheme(normalizer):
    """Test every label seen gets a color, in first-seen order."""
    graph = normalizer.normalize([{"id": "1", "labels": ["Person", "__Entity__"]}], [])
    assert list(graph.scheme) == ["Person", "__Entity__"]


def test_graph_types(normalizer, doc_chunk_graph):
    """Test canonical graph exposes its categories."""
    graph = normalizer.normalize(*doc_chunk_graph)
    assert graph.graph_types == [GraphType.DOCUMENT_CHUNK]


def test_empty_input(normalizer):
    """Test empty input gives an empty graph."""
    graph = normalizer.normalize([], [])
    assert graph.is_empty
    assert len(graph) == 0
    assert graph == CanonicalGraph(report=graph.report)


def test_does_not_mutate_raw_input(normalizer):
    """Test raw records are left as they were."""
    nodes = [
        {"id": "1", "labels": ["A"], "properties": {"k": 1}},
        {"id": "1", "labels": ["A"], "properties": {"k": 2}},
    ]
    normalizer.normalize(nodes, [])
    assert nodes[0]["properties"] == {"k": 1}
