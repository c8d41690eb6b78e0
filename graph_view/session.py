"""Viewer session state.

Provides the high-level API the UI drives: loading graphs, toggling
categories, searching, selecting, and reading the visible and schema views.
The session owns the color scheme for its whole lifetime; only clear()
resets it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from graph_view.conditions import checkbox_conditions
from graph_view.filter_engine import FilterEngine, FilterResult
from graph_view.node import GraphType
from graph_view.normalizer import CanonicalGraph, GraphNormalizer, NormalizationReport
from graph_view.query_client import FetchError, query_type_for
from graph_view.sample_data import SampleDataGenerator
from graph_view.schema import SchemaSummary, extract_schema

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graph_view.node import Node, Relationship
    from graph_view.query_client import CancellationToken, ConnectionSettings, GraphQueryClient
    from graph_view.scheme import Scheme


logger = logging.getLogger(__name__)

EntityType = Literal["node", "relationship"]


class LoadStatus(str, Enum):
    """Outcome of the latest load."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    NO_DATA = "no_data"
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult:
    """Status of a load plus a message fit for the user."""

    status: LoadStatus = LoadStatus.UNKNOWN
    message: str = ""
    report: NormalizationReport | None = None


class GraphSession:
    """State of one viewer session.

    Every load replaces the canonical graph as a whole. A failed or cancelled
    backend load leaves the previously committed graph in place.
    """

    def __init__(
        self,
        normalizer: GraphNormalizer | None = None,
        filter_engine: FilterEngine | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            normalizer: Graph normalizer (default settings if None)
            filter_engine: Filter engine (default settings if None)
        """
        self.normalizer = normalizer or GraphNormalizer()
        self.filter_engine = filter_engine or FilterEngine()

        self.graph = CanonicalGraph()
        self.scheme: Scheme = {}
        self.active_categories: list[GraphType] = []
        self.query = ""
        self.schema_mode = False
        self.selected: tuple[EntityType, str] | None = None
        self.last_result = LoadResult()

    def load(
        self,
        raw_nodes: Iterable[Any],
        raw_relationships: Iterable[Any],
    ) -> LoadResult:
        """Normalize and commit a new snapshot.

        Args:
            raw_nodes: Raw node records
            raw_relationships: Raw relationship records

        Returns:
            LoadResult (NO_DATA when the snapshot is empty)
        """
        graph = self.normalizer.normalize(raw_nodes, raw_relationships, self.scheme)
        self._commit(graph)

        if graph.is_empty:
            result = LoadResult(LoadStatus.NO_DATA, "No graph data available.", graph.report)
        else:
            result = LoadResult(
                LoadStatus.SUCCESS,
                f"Loaded {len(graph.nodes)} nodes and {len(graph.relationships)} relationships",
                graph.report,
            )

        self.last_result = result
        logger.info(result.message)
        return result

    def load_sample(
        self,
        generator: SampleDataGenerator | None = None,
        **kwargs: Any,
    ) -> LoadResult:
        """Load a generated sample graph.

        Args:
            generator: Sample data generator (default seed if None)
            **kwargs: Size arguments for SampleDataGenerator.generate

        Returns:
            LoadResult of the sample load
        """
        generator = generator or SampleDataGenerator()
        raw_nodes, raw_relationships = generator.generate(**kwargs)
        return self.load(raw_nodes, raw_relationships)

    def load_from_backend(
        self,
        client: GraphQueryClient,
        connection: ConnectionSettings,
        query_type: str | None = None,
        token: CancellationToken | None = None,
    ) -> LoadResult:
        """Fetch a graph from the backend and commit it.

        Args:
            client: Backend query client
            connection: Connection settings and document names
            query_type: Backend query type (derived from active categories if None)
            token: Cancellation token for the request

        Returns:
            LoadResult; FAILED keeps the previously committed graph
        """
        if query_type is None:
            query_type = query_type_for(self.active_categories) or "Entities"

        try:
            raw_nodes, raw_relationships = client.fetch(query_type, connection, token)
        except FetchError as e:
            logger.error("Error loading backend data: %s", e.message)
            self.last_result = LoadResult(LoadStatus.FAILED, e.message)
            return self.last_result

        return self.load(raw_nodes, raw_relationships)

    def _commit(self, graph: CanonicalGraph) -> None:
        self.graph = graph
        self.scheme = dict(graph.scheme)
        self.active_categories = graph.graph_types
        self.selected = None

    def clear(self) -> None:
        """Drop all data and start a fresh color scheme."""
        self.graph = CanonicalGraph()
        self.scheme = {}
        self.active_categories = []
        self.query = ""
        self.schema_mode = False
        self.selected = None
        self.last_result = LoadResult()

    def toggle_category(self, graph_type: GraphType) -> list[GraphType]:
        """Switch a category on or off.

        Returns:
            The active categories after the toggle
        """
        if graph_type in self.active_categories:
            self.active_categories = [t for t in self.active_categories if t != graph_type]
        else:
            self.active_categories = [*self.active_categories, graph_type]
        return self.active_categories

    def set_query(self, query: str) -> None:
        self.query = query

    def visible(self) -> FilterResult:
        """Visible subset for the current categories and query."""
        return self.filter_engine.apply(
            self.active_categories,
            self.graph.nodes,
            self.graph.relationships,
            self.graph.scheme,
            self.query,
        )

    def refresh(self) -> FilterResult:
        """Reset categories and search so the whole graph is visible again."""
        self.active_categories = self.graph.graph_types
        self.query = ""
        return self.visible()

    def schema(self, filtered: bool = False) -> SchemaSummary:
        """Schema summary of the full graph, or of the visible subset.

        Args:
            filtered: Summarize the visible subset instead of the full graph
        """
        if filtered:
            view = self.visible()
            return extract_schema(view.nodes, view.relationships)
        return extract_schema(self.graph.nodes, self.graph.relationships)

    def checkbox_conditions(self) -> dict[GraphType, bool]:
        return checkbox_conditions(self.graph.nodes)

    def select(self, kind: EntityType, item_id: str) -> None:
        self.selected = (kind, item_id)

    def clear_selection(self) -> None:
        self.selected = None

    def selected_item(self) -> Node | Relationship | None:
        """The selected node or relationship, looked up in the full graph."""
        if self.selected is None:
            return None
        kind, item_id = self.selected
        if kind == "node":
            return self.graph.get_node(item_id)
        return self.graph.get_relationship(item_id)

    def __repr__(self) -> str:
        return (
            f"GraphSession(nodes={len(self.graph.nodes)}, "
            f"relationships={len(self.graph.relationships)}, labels={len(self.scheme)})"
        )
