"""Tests for schema extraction."""

from graph_view.normalizer import GraphNormalizer
from graph_view.schema import extract_schema, schema_node_id


def build(nodes, relationships):
    return GraphNormalizer().normalize(nodes, relationships)


def test_one_node_per_label():
    """Test each label is represented once with instance counts."""
    graph = build(
        [
            {"id": "1", "labels": ["Document"]},
            {"id": "2", "labels": ["Chunk"]},
            {"id": "3", "labels": ["Chunk"]},
        ],
        [],
    )

    summary = extract_schema(graph.nodes, graph.relationships)

    assert [node.id for node in summary.nodes] == ["schema:Document", "schema:Chunk"]
    chunk = summary.nodes[1]
    assert chunk.caption == "Chunk"
    assert chunk.labels == ["Chunk"]
    assert chunk.properties == {"count": 2}
    assert chunk.color == graph.scheme["Chunk"]


def test_one_relationship_per_type():
    """Test each relationship type is represented once."""
    graph = build(
        [
            {"id": "1", "labels": ["Document"]},
            {"id": "2", "labels": ["Chunk"]},
            {"id": "3", "labels": ["Chunk"]},
        ],
        [
            {"id": "r1", "type": "HAS_CHUNK", "from": "1", "to": "2"},
            {"id": "r2", "type": "HAS_CHUNK", "from": "1", "to": "3"},
            {"id": "r3", "type": "NEXT_CHUNK", "from": "2", "to": "3"},
        ],
    )

    summary = extract_schema(graph.nodes, graph.relationships)

    assert len(summary.relationships) == 2
    has_chunk = summary.relationships[0]
    assert has_chunk.type == "HAS_CHUNK"
    assert has_chunk.from_id == schema_node_id("Document")
    assert has_chunk.to_id == schema_node_id("Chunk")
    assert has_chunk.properties == {"count": 2}
    next_chunk = summary.relationships[1]
    assert next_chunk.from_id == next_chunk.to_id == schema_node_id("Chunk")


def test_schema_endpoints_are_schema_nodes():
    """Test schema relationships only connect schema nodes."""
    graph = build(
        [{"id": "a", "labels": ["A"]}, {"id": "b", "labels": ["B"]}],
        [{"id": "r", "type": "R", "from": "a", "to": "b"}],
    )
    summary = extract_schema(graph.nodes, graph.relationships)

    schema_ids = {node.id for node in summary.nodes}
    for rel in summary.relationships:
        assert rel.from_id in schema_ids
        assert rel.to_id in schema_ids


def test_relationship_with_unrepresented_endpoint_skipped():
    """Test types whose endpoints are not in the node set are left out."""
    graph = build(
        [{"id": "a", "labels": ["A"]}, {"id": "b", "labels": ["B"]}],
        [{"id": "r", "type": "R", "from": "a", "to": "b"}],
    )
    only_a = [node for node in graph.nodes if node.id == "a"]

    summary = extract_schema(only_a, graph.relationships)

    assert len(summary.nodes) == 1
    assert summary.relationships == ()


def test_unlabeled_nodes_ignored():
    """Test nodes without labels have no schema node."""
    graph = build([{"id": "x"}], [])
    assert extract_schema(graph.nodes, graph.relationships).nodes == ()


def test_schema_size_bound():
    """Test 1,000 nodes over 5 labels summarize to at most 5 nodes."""
    labels = ["Document", "Chunk", "Person", "Organization", "Place"]
    nodes = [{"id": str(i), "labels": [labels[i % 5]]} for i in range(1000)]
    relationships = [
        {"id": f"r{i}", "type": f"T{i % 3}", "from": str(i), "to": str(i + 1)}
        for i in range(999)
    ]
    graph = build(nodes, relationships)

    summary = extract_schema(graph.nodes, graph.relationships)

    assert len(summary.nodes) <= 5
    assert len(summary.relationships) <= 3
    assert sum(node.properties["count"] for node in summary.nodes) == 1000


def test_schema_does_not_mutate_graph():
    """Test the canonical graph is unchanged."""
    graph = build([{"id": "1", "labels": ["Document"], "properties": {"fileName": "a"}}], [])
    extract_schema(graph.nodes, graph.relationships)

    assert graph.nodes[0].id == "1"
    assert graph.nodes[0].caption == "a"
