"""Sample graph fixtures.

Generates raw query results shaped like the backend's: documents split into
chunks, entities mentioned by the chunks and communities over the entities.
Entities are emitted once per mention, so the same ID appears several times
with different properties, as it does when several queries overlap.
"""

from __future__ import annotations

import random
import re
from typing import Any

from graph_view.classifier import CHUNK_LABEL, COMMUNITY_LABEL, DOCUMENT_LABEL


SAMPLE_FILES: tuple[str, ...] = (
    "Apple stock during pandemic.pdf",
    "Market analysis report.pdf",
    "Financial statements Q4.pdf",
    "Investment portfolio.pdf",
)

SAMPLE_SENTENCES: tuple[str, ...] = (
    "Apple shares fell sharply in March as lockdowns closed retail stores.",
    "Demand for laptops and tablets rose as people started working from home.",
    "Tim Cook said supply chains in China recovered faster than expected.",
    "The company announced a four-for-one stock split in July.",
    "Analysts raised their price targets after strong services revenue.",
    "The iPhone 12 launch was delayed by several weeks.",
    "Investors moved into large technology stocks during the pandemic.",
    "Federal Reserve rate cuts supported equity valuations.",
)

# (label, name, description)
ENTITY_POOL: tuple[tuple[str, str, str], ...] = (
    ("Organization", "Apple", "Consumer electronics company based in Cupertino"),
    ("Person", "Tim Cook", "Chief executive officer of Apple"),
    ("Event", "COVID-19 pandemic", "Global pandemic starting in 2020"),
    ("Product", "iPhone 12", "Smartphone released in October 2020"),
    ("Location", "Cupertino", "City in California"),
    ("Organization", "Federal Reserve", "Central bank of the United States"),
    ("Concept", "Stock split", "Division of existing shares into more shares"),
    ("Location", "China", "Country hosting much of the supply chain"),
)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class SampleDataGenerator:
    """Deterministic generator of raw sample graphs."""

    def __init__(self, seed: int = 42) -> None:
        """Initialize the generator.

        Args:
            seed: Random seed; the same seed always yields the same graph
        """
        self.seed = seed

    def generate(
        self,
        documents: int = 2,
        chunks_per_document: int = 3,
        entities_per_chunk: int = 2,
        communities: int = 2,
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Generate a raw sample graph.

        Args:
            documents: Number of Document nodes
            chunks_per_document: Chunks per document
            entities_per_chunk: Entities mentioned by each chunk
            communities: Number of community nodes (0 for none)

        Returns:
            Tuple of (raw_nodes, raw_relationships)
        """
        rng = random.Random(self.seed)
        nodes: list[dict[str, Any]] = []
        relationships: list[dict[str, Any]] = []
        entity_ids: list[str] = []

        def relate(rel_type: str, from_id: str, to_id: str, **properties: Any) -> None:
            relationships.append({
                "id": f"{rel_type.lower()}:{from_id}:{to_id}",
                "type": rel_type,
                "from": from_id,
                "to": to_id,
                "properties": properties,
            })

        for d in range(documents):
            doc_id = f"doc-{d}"
            file_name = SAMPLE_FILES[d % len(SAMPLE_FILES)]
            if d >= len(SAMPLE_FILES):
                file_name = f"{d} - {file_name}"
            nodes.append({
                "id": doc_id,
                "labels": [DOCUMENT_LABEL],
                "properties": {
                    "fileName": file_name,
                    "fileSize": rng.randint(50_000, 5_000_000),
                    "status": "Completed",
                },
            })

            previous_chunk = None
            for c in range(chunks_per_document):
                chunk_id = f"chunk-{d}-{c}"
                nodes.append({
                    "id": chunk_id,
                    "labels": [CHUNK_LABEL],
                    "properties": {
                        "text": rng.choice(SAMPLE_SENTENCES),
                        "position": c + 1,
                        "fileName": file_name,
                    },
                })
                relate("PART_OF", chunk_id, doc_id)
                if previous_chunk is None:
                    relate("FIRST_CHUNK", doc_id, chunk_id)
                else:
                    relate("NEXT_CHUNK", previous_chunk, chunk_id)
                previous_chunk = chunk_id

                mentioned = rng.sample(ENTITY_POOL, min(entities_per_chunk, len(ENTITY_POOL)))
                mentioned_ids = []
                for label, name, description in mentioned:
                    entity_id = f"entity-{_slug(name)}"
                    mentioned_ids.append(entity_id)
                    properties: dict[str, Any] = {"id": name, "lastSeenIn": chunk_id}
                    if entity_id not in entity_ids:
                        entity_ids.append(entity_id)
                        properties["description"] = description
                    nodes.append({
                        "id": entity_id,
                        "labels": [label, "__Entity__"],
                        "properties": properties,
                    })
                    relate("HAS_ENTITY", chunk_id, entity_id)

                for a, b in zip(mentioned_ids, mentioned_ids[1:]):
                    relate("RELATED_TO", a, b)

        for k in range(communities):
            community_id = f"community-{k}"
            members = entity_ids[k::communities] if entity_ids else []
            nodes.append({
                "id": community_id,
                "labels": [COMMUNITY_LABEL],
                "properties": {
                    "title": f"Community {k + 1}",
                    "weight": len(members),
                    "level": 0,
                },
            })
            for entity_id in members:
                relate("IN_COMMUNITY", entity_id, community_id)

        return nodes, relationships

    def __repr__(self) -> str:
        return f"SampleDataGenerator(seed={self.seed})"
