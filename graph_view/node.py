"""Core node and relationship representation for the viewer graph.

A Node is a document, chunk, entity or community returned by a graph query,
annotated with the display attributes the rendering widget needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class GraphType(str, Enum):
    """Coarse node categories used for the filter toggles.

    - DocumentChunk: Source documents and the chunks they were split into
    - Entities: Anything extracted from the chunks (people, places, ...)
    - Communities: Community summary nodes built over the entities
    """

    DOCUMENT_CHUNK = "DocumentChunk"
    ENTITIES = "Entities"
    COMMUNITIES = "Communities"


@dataclass
class Node:
    """A normalized node ready for display.

    Attributes:
        id: Unique identifier within one graph snapshot
        labels: Ordered labels; the first one is the primary label
        caption: Display text derived from a label-specific property
        properties: Arbitrary properties from the query result
        color: Color of the primary label in the current scheme
        size: Size hint for the rendering widget
        icon: Optional icon hint
    """

    id: str
    labels: list[str] = field(default_factory=list)
    caption: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    color: str = ""
    size: int = 25
    icon: str | None = None

    @property
    def primary_label(self) -> str | None:
        """First label of the node, or None for an unlabeled node."""
        return self.labels[0] if self.labels else None

    def to_dict(self) -> dict[str, Any]:
        """Convert node to the dictionary shape the widget consumes.

        Returns:
            Dictionary containing all node data
        """
        return {
            "id": self.id,
            "labels": list(self.labels),
            "caption": self.caption,
            "properties": dict(self.properties),
            "color": self.color,
            "size": self.size,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        """Create a Node from dictionary representation.

        Args:
            data: Dictionary containing node data

        Returns:
            A new Node instance
        """
        return cls(
            id=data["id"],
            labels=list(data.get("labels", [])),
            caption=data.get("caption", ""),
            properties=dict(data.get("properties", {})),
            color=data.get("color", ""),
            size=data.get("size", 25),
            icon=data.get("icon"),
        )

    def __repr__(self) -> str:
        return f"Node(id={self.id[:8]}, label={self.primary_label}, caption={self.caption!r})"


@dataclass
class Relationship:
    """A normalized relationship between two nodes of the same snapshot.

    Attributes:
        id: Unique identifier within one graph snapshot
        type: Relationship type, e.g. HAS_ENTITY
        from_id: ID of the start node
        to_id: ID of the end node
        properties: Arbitrary properties from the query result
    """

    id: str
    type: str
    from_id: str
    to_id: str
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def caption(self) -> str:
        return self.type

    def to_dict(self) -> dict[str, Any]:
        """Convert relationship to the dictionary shape the widget consumes."""
        return {
            "id": self.id,
            "type": self.type,
            "from": self.from_id,
            "to": self.to_id,
            "caption": self.caption,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Relationship:
        """Create a Relationship from dictionary representation."""
        return cls(
            id=data["id"],
            type=data["type"],
            from_id=data["from"],
            to_id=data["to"],
            properties=dict(data.get("properties", {})),
        )

    def __repr__(self) -> str:
        return f"Relationship({self.from_id[:8]}-[{self.type}]->{self.to_id[:8]})"
