"""Normalization of raw query results into the canonical graph.

Raw records from several queries may overlap and may be malformed. The
normalizer validates them, merges duplicates, derives captions, colors and
size hints, and drops relationships that point outside the node set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from graph_view.classifier import (
    CHUNK_LABEL,
    COMMUNITY_LABEL,
    DOCUMENT_LABEL,
    graph_types_from_nodes,
)
from graph_view.node import GraphType, Node, Relationship
from graph_view.records import RawNode, RawRelationship
from graph_view.scheme import Scheme, SchemeAssigner

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


logger = logging.getLogger(__name__)

# Label -> candidate caption properties, first non-empty wins
CAPTION_PROPERTIES: Mapping[str, tuple[str, ...]] = {
    DOCUMENT_LABEL: ("fileName", "file_name", "title", "name"),
    CHUNK_LABEL: ("text", "content"),
    COMMUNITY_LABEL: ("title", "summary", "id"),
}
DEFAULT_CAPTION_PROPERTIES: tuple[str, ...] = ("id", "name", "title", "description")

# Label -> size hint for the rendering widget
LABEL_SIZES: Mapping[str, int] = {
    DOCUMENT_LABEL: 40,
    CHUNK_LABEL: 30,
    COMMUNITY_LABEL: 30,
}
DEFAULT_SIZE = 25
MAX_COMMUNITY_BUMP = 20

LABEL_ICONS: Mapping[str, str] = {
    DOCUMENT_LABEL: "document",
    CHUNK_LABEL: "chunk",
    COMMUNITY_LABEL: "community",
}

UNLABELED_COLOR = "#9e9e9e"


@dataclass
class NormalizationReport:
    """Counts of records dropped or merged during one normalization pass."""

    skipped_nodes: int = 0
    skipped_relationships: int = 0
    dangling_relationships: int = 0
    merged_nodes: int = 0

    @property
    def dropped(self) -> int:
        return self.skipped_nodes + self.skipped_relationships + self.dangling_relationships


@dataclass(frozen=True)
class CanonicalGraph:
    """Deduplicated, annotated graph produced by the normalizer.

    Attributes:
        nodes: Nodes in first-seen order
        relationships: Relationships whose endpoints are both in nodes
        scheme: Label -> color mapping after this pass
        report: What was dropped or merged to get here
    """

    nodes: tuple[Node, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    scheme: Scheme = field(default_factory=dict)
    report: NormalizationReport = field(default_factory=NormalizationReport)

    @property
    def graph_types(self) -> list[GraphType]:
        return graph_types_from_nodes(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.relationships

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        return next((node for node in self.nodes if node.id == node_id), None)

    def get_relationship(self, relationship_id: str) -> Relationship | None:
        """Get a relationship by ID."""
        return next((rel for rel in self.relationships if rel.id == relationship_id), None)

    def __len__(self) -> int:
        return len(self.nodes)


def truncate(text: str, max_length: int) -> str:
    """Shorten text to max_length characters, marking the cut with an ellipsis."""
    if max_length <= 0 or len(text) <= max_length:
        return text
    return text[: max(max_length - 1, 1)] + "…"


class GraphNormalizer:
    """Turns raw node and relationship records into a CanonicalGraph.

    Malformed records are skipped one by one; a pass never fails because of
    partial input.
    """

    def __init__(
        self,
        scheme_assigner: SchemeAssigner | None = None,
        caption_max_length: int = 40,
        caption_properties: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        """Initialize the normalizer.

        Args:
            scheme_assigner: Color assigner (default palette if None)
            caption_max_length: Captions longer than this are truncated
            caption_properties: Per-label caption candidates (defaults if None)
        """
        self.scheme_assigner = scheme_assigner or SchemeAssigner()
        self.caption_max_length = caption_max_length
        self.caption_properties = dict(caption_properties or CAPTION_PROPERTIES)

    def normalize(
        self,
        raw_nodes: Iterable[Any],
        raw_relationships: Iterable[Any],
        scheme: Mapping[str, str] | None = None,
    ) -> CanonicalGraph:
        """Normalize one snapshot of raw query results.

        Args:
            raw_nodes: Raw node records (dicts or RawNode)
            raw_relationships: Raw relationship records (dicts or RawRelationship)
            scheme: Scheme from previous passes of the same session

        Returns:
            The canonical graph, including the extended scheme
        """
        report = NormalizationReport()

        merged = self._merge_nodes(raw_nodes, report)

        all_labels = (label for raw in merged.values() for label in raw.labels)
        new_scheme = self.scheme_assigner.assign_all(all_labels, scheme)

        nodes = tuple(self._build_node(raw, new_scheme) for raw in merged.values())
        node_ids = set(merged)

        relationships = self._merge_relationships(raw_relationships, node_ids, report)

        if report.dropped:
            logger.warning(
                "Normalization dropped %d malformed nodes, %d malformed relationships "
                "and %d dangling relationships",
                report.skipped_nodes,
                report.skipped_relationships,
                report.dangling_relationships,
            )
        logger.debug(
            "Normalized %d nodes and %d relationships (%d duplicate nodes merged)",
            len(nodes),
            len(relationships),
            report.merged_nodes,
        )

        return CanonicalGraph(
            nodes=nodes,
            relationships=relationships,
            scheme=new_scheme,
            report=report,
        )

    def _merge_nodes(
        self,
        raw_nodes: Iterable[Any],
        report: NormalizationReport,
    ) -> dict[str, RawNode]:
        """Validate raw nodes and merge duplicates by ID.

        Later records override earlier ones on overlapping property keys.
        The first record fixes the label order; new labels are appended.
        """
        merged: dict[str, RawNode] = {}

        for raw in raw_nodes:
            try:
                record = RawNode.model_validate(raw)
            except ValidationError as e:
                report.skipped_nodes += 1
                logger.debug("Skipping malformed node %r: %s", raw, e)
                continue

            existing = merged.get(record.id)
            if existing is None:
                merged[record.id] = record
                continue

            report.merged_nodes += 1
            labels = list(existing.labels)
            labels.extend(label for label in record.labels if label not in labels)
            merged[record.id] = RawNode(
                id=record.id,
                labels=labels,
                properties={**existing.properties, **record.properties},
            )

        return merged

    def _merge_relationships(
        self,
        raw_relationships: Iterable[Any],
        node_ids: set[str],
        report: NormalizationReport,
    ) -> tuple[Relationship, ...]:
        """Validate raw relationships, dedupe by ID and drop dangling ones."""
        merged: dict[str, RawRelationship] = {}

        for raw in raw_relationships:
            try:
                record = RawRelationship.model_validate(raw)
            except ValidationError as e:
                report.skipped_relationships += 1
                logger.debug("Skipping malformed relationship %r: %s", raw, e)
                continue
            merged[record.id] = record

        relationships = []
        for record in merged.values():
            if record.from_id not in node_ids or record.to_id not in node_ids:
                report.dangling_relationships += 1
                continue
            relationships.append(
                Relationship(
                    id=record.id,
                    type=record.type,
                    from_id=record.from_id,
                    to_id=record.to_id,
                    properties=dict(record.properties),
                )
            )

        return tuple(relationships)

    def _build_node(self, raw: RawNode, scheme: Mapping[str, str]) -> Node:
        """Annotate a merged raw node with its display attributes."""
        primary = raw.labels[0] if raw.labels else None
        return Node(
            id=raw.id,
            labels=list(raw.labels),
            caption=self.caption_for(raw.id, raw.labels, raw.properties),
            properties=dict(raw.properties),
            color=scheme[primary] if primary is not None else UNLABELED_COLOR,
            size=self.size_for(raw.labels, raw.properties),
            icon=self.icon_for(raw.labels),
        )

    def caption_for(
        self,
        node_id: str,
        labels: Sequence[str],
        properties: Mapping[str, Any],
    ) -> str:
        """Derive the display caption of a node.

        Args:
            node_id: Node ID, used as the last resort
            labels: Node labels; the first label with a caption rule is used
            properties: Node properties

        Returns:
            The first non-empty candidate property, truncated
        """
        candidates = next(
            (self.caption_properties[label] for label in labels if label in self.caption_properties),
            DEFAULT_CAPTION_PROPERTIES,
        )

        for name in candidates:
            value = properties.get(name)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                return truncate(text, self.caption_max_length)

        return truncate(node_id, self.caption_max_length)

    @staticmethod
    def size_for(labels: Sequence[str], properties: Mapping[str, Any]) -> int:
        """Size hint: fixed per structural label, communities grow with weight."""
        for label in labels:
            if label == COMMUNITY_LABEL:
                weight = properties.get("weight", 0)
                bump = int(weight) if isinstance(weight, (int, float)) else 0
                return LABEL_SIZES[COMMUNITY_LABEL] + max(0, min(bump, MAX_COMMUNITY_BUMP))
            if label in LABEL_SIZES:
                return LABEL_SIZES[label]
        return DEFAULT_SIZE

    @staticmethod
    def icon_for(labels: Sequence[str]) -> str | None:
        return next((LABEL_ICONS[label] for label in labels if label in LABEL_ICONS), None)

    def __repr__(self) -> str:
        return f"GraphNormalizer(caption_max={self.caption_max_length}, {self.scheme_assigner!r})"
