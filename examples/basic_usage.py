"""Basic usage example for graph_view.

Demonstrates loading a sample graph, filtering it by category and search,
and summarizing it into a schema.

To fetch from a backend instead of the sample generator:
1. Set GRAPH_VIEW_BACKEND_URL, NEO4J_URI and NEO4J_PASSWORD
2. Run this script
"""

import logging
import os
import sys
from pathlib import Path

# Add project root to path for imports without pip install
sys.path.insert(0, str(Path(__file__).parent.parent))

from graph_view import (
    ConnectionSettings,
    GraphQueryClient,
    GraphSession,
    GraphType,
    SampleDataGenerator,
    ViewerConfig,
)


def main():
    """Run the basic usage example."""
    config = ViewerConfig.from_env()
    logging.basicConfig(level=config.log_level)

    session = GraphSession()

    # Option 1: Fetch from the backend when a connection is configured
    if os.getenv("GRAPH_VIEW_BACKEND_URL") and config.neo4j_password:
        client = GraphQueryClient(config.backend_url, timeout=config.timeout)
        connection = ConnectionSettings(
            uri=config.neo4j_uri,
            username=config.neo4j_username,
            password=config.neo4j_password,
            database=config.neo4j_database,
            document_names=["Apple stock during pandemic.pdf"],
        )
        result = session.load_from_backend(client, connection, query_type="DocChunkEntities")
        print(f"Using backend at {config.backend_url}\n")
    # Option 2: Use generated sample data
    else:
        result = session.load_sample(SampleDataGenerator(seed=7), documents=2, chunks_per_document=3)
        print("Using sample data (no backend configured)\n")

    print("=" * 60)
    print("LOAD")
    print("=" * 60)
    print(f"Status: {result.status.value} - {result.message}")
    if result.report is not None:
        print(f"Merged duplicate nodes: {result.report.merged_nodes}")
        print(f"Dropped records: {result.report.dropped}\n")

    print("=" * 60)
    print("COLOR SCHEME")
    print("=" * 60)
    for label, color in session.scheme.items():
        print(f"  {label:<20} {color}")
    print()

    print("=" * 60)
    print("CATEGORIES")
    print("=" * 60)
    for graph_type, present in session.checkbox_conditions().items():
        print(f"  {graph_type.value:<15} {'present' if present else 'absent'}")
    print()

    print("=" * 60)
    print("FILTER: entities only, search 'apple'")
    print("=" * 60)
    session.active_categories = [GraphType.ENTITIES]
    session.set_query("apple")
    view = session.visible()
    print(f"Status: {view.status.value}")
    for node in view.nodes:
        print(f"  [{node.primary_label}] {node.caption}")
    print(f"Relationships: {len(view.relationships)}\n")

    print("=" * 60)
    print("SCHEMA")
    print("=" * 60)
    summary = session.schema()
    for node in summary.nodes:
        print(f"  ({node.caption}) x{node.properties['count']}")
    for rel in summary.relationships:
        print(f"  {rel.from_id} -[{rel.type}]-> {rel.to_id} x{rel.properties['count']}")


if __name__ == "__main__":
    main()
