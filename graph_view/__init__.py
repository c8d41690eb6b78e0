"""graph_view: knowledge graph normalization, filtering and schema views.

Turns raw document, chunk and entity query results into a deduplicated,
colored graph, filters it by category and free-text search, and summarizes
it into a one-node-per-label schema for overview rendering.
"""

from graph_view.classifier import category_for_labels, graph_types_from_nodes
from graph_view.conditions import checkbox_conditions, disabled_categories
from graph_view.config import ViewerConfig
from graph_view.filter_engine import FilterEngine, FilterResult, FilterStatus
from graph_view.node import GraphType, Node, Relationship
from graph_view.normalizer import CanonicalGraph, GraphNormalizer, NormalizationReport
from graph_view.query_client import (
    CancellationToken,
    ConnectionSettings,
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
    GraphQueryClient,
)
from graph_view.sample_data import SampleDataGenerator
from graph_view.schema import SchemaSummary, extract_schema
from graph_view.scheme import SchemeAssigner
from graph_view.session import GraphSession, LoadResult, LoadStatus
from graph_view.widget import PlotlyGraphWidget

__version__ = "0.1.0"
__all__ = [
    "GraphSession",
    "LoadResult",
    "LoadStatus",
    "GraphNormalizer",
    "CanonicalGraph",
    "NormalizationReport",
    "FilterEngine",
    "FilterResult",
    "FilterStatus",
    "SchemeAssigner",
    "SchemaSummary",
    "extract_schema",
    "Node",
    "Relationship",
    "GraphType",
    "category_for_labels",
    "graph_types_from_nodes",
    "checkbox_conditions",
    "disabled_categories",
    "GraphQueryClient",
    "ConnectionSettings",
    "CancellationToken",
    "FetchError",
    "FetchCancelledError",
    "FetchTimeoutError",
    "SampleDataGenerator",
    "PlotlyGraphWidget",
    "ViewerConfig",
]
