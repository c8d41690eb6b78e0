"""Rendering widget adapter.

Implements the widget contract the viewer talks to (set nodes and
relationships, fit, zoom, click callbacks) on top of networkx layouts drawn
with plotly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx
import plotly.graph_objects as go

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from graph_view.node import Node, Relationship


ZOOM_IN_FACTOR = 1.3
ZOOM_OUT_FACTOR = 0.7
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0
FIT_PADDING = 0.15

LAYOUTS = ("spring", "circular", "random")


class PlotlyGraphWidget:
    """Graph widget rendering nodes and relationships as a plotly figure."""

    def __init__(
        self,
        layout: str = "spring",
        seed: int = 42,
        height: int = 600,
    ) -> None:
        """Initialize the widget.

        Args:
            layout: One of LAYOUTS
            seed: Seed for the randomized layouts
            height: Figure height in pixels
        """
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {layout!r}, expected one of {LAYOUTS}")
        self.layout = layout
        self.seed = seed
        self.height = height

        self.nodes: list[Node] = []
        self.relationships: list[Relationship] = []
        self.scale = 1.0
        self.fitted_ids: list[str] = []

        self._node_callbacks: list[Callable[[Node], None]] = []
        self._relationship_callbacks: list[Callable[[Relationship], None]] = []
        self._canvas_callbacks: list[Callable[[], None]] = []

    def set_nodes(self, nodes: Iterable[Node]) -> None:
        self.nodes = list(nodes)

    def set_relationships(self, relationships: Iterable[Relationship]) -> None:
        self.relationships = list(relationships)

    def fit(self, node_ids: Sequence[str]) -> None:
        """Frame the given nodes and reset the zoom level.

        Args:
            node_ids: Nodes to keep in view (all nodes if empty)
        """
        self.fitted_ids = list(node_ids)
        self.scale = 1.0

    def get_scale(self) -> float:
        return self.scale

    def set_zoom(self, scale: float) -> None:
        """Set the zoom level, clamped to [MIN_ZOOM, MAX_ZOOM]."""
        self.scale = max(MIN_ZOOM, min(MAX_ZOOM, scale))

    def zoom_in(self) -> None:
        self.set_zoom(self.get_scale() * ZOOM_IN_FACTOR)

    def zoom_out(self) -> None:
        self.set_zoom(self.get_scale() * ZOOM_OUT_FACTOR)

    def on_node_click(self, callback: Callable[[Node], None]) -> None:
        self._node_callbacks.append(callback)

    def on_relationship_click(self, callback: Callable[[Relationship], None]) -> None:
        self._relationship_callbacks.append(callback)

    def on_canvas_click(self, callback: Callable[[], None]) -> None:
        self._canvas_callbacks.append(callback)

    def click(self, kind: str | None = None, item_id: str | None = None) -> None:
        """Dispatch a click to the registered callbacks.

        A click that does not hit a displayed node or relationship counts as
        a canvas click.

        Args:
            kind: "node", "relationship", or None for the canvas
            item_id: ID of the clicked item
        """
        if kind == "node":
            node = next((n for n in self.nodes if n.id == item_id), None)
            if node is not None:
                for callback in self._node_callbacks:
                    callback(node)
                return
        elif kind == "relationship":
            rel = next((r for r in self.relationships if r.id == item_id), None)
            if rel is not None:
                for callback in self._relationship_callbacks:
                    callback(rel)
                return

        for callback in self._canvas_callbacks:
            callback()

    def build_graph(self) -> nx.MultiDiGraph:
        """networkx graph of the displayed items.

        Relationships whose endpoints are not displayed are left out.
        """
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, node=node)
        for rel in self.relationships:
            if rel.from_id in graph and rel.to_id in graph:
                graph.add_edge(rel.from_id, rel.to_id, key=rel.id, relationship=rel)
        return graph

    def positions(self, graph: nx.MultiDiGraph) -> dict[str, tuple[float, float]]:
        """Compute 2D positions with the configured layout."""
        if graph.number_of_nodes() == 0:
            return {}
        if self.layout == "circular":
            pos = nx.circular_layout(graph)
        elif self.layout == "random":
            pos = nx.random_layout(graph, seed=self.seed)
        else:
            pos = nx.spring_layout(graph, k=2 / max(graph.number_of_nodes(), 1) ** 0.5, iterations=50, seed=self.seed)
        return {node_id: (float(x), float(y)) for node_id, (x, y) in pos.items()}

    def viewport(
        self,
        pos: dict[str, tuple[float, float]],
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """Axis ranges framing the fitted nodes at the current zoom.

        Returns:
            ((x_min, x_max), (y_min, y_max)), or None when nothing is placed
        """
        ids = [node_id for node_id in self.fitted_ids if node_id in pos] or list(pos)
        if not ids:
            return None

        xs = [pos[node_id][0] for node_id in ids]
        ys = [pos[node_id][1] for node_id in ids]
        cx, cy = (min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2
        half_w = (max(xs) - min(xs)) / 2 + FIT_PADDING
        half_h = (max(ys) - min(ys)) / 2 + FIT_PADDING

        half_w /= self.scale
        half_h /= self.scale
        return (cx - half_w, cx + half_w), (cy - half_h, cy + half_h)

    def to_figure(self, show_captions: bool = True) -> go.Figure:
        """Render the displayed graph as a plotly figure.

        Args:
            show_captions: Draw node captions next to the markers

        Returns:
            Figure with one edge trace and one node trace
        """
        graph = self.build_graph()
        pos = self.positions(graph)

        edge_x: list[float | None] = []
        edge_y: list[float | None] = []
        edge_mid_x: list[float] = []
        edge_mid_y: list[float] = []
        edge_text: list[str] = []

        for from_id, to_id, data in graph.edges(data=True):
            x0, y0 = pos[from_id]
            x1, y1 = pos[to_id]
            edge_x.extend([x0, x1, None])
            edge_y.extend([y0, y1, None])
            edge_mid_x.append((x0 + x1) / 2)
            edge_mid_y.append((y0 + y1) / 2)
            edge_text.append(data["relationship"].caption)

        node_ids = list(graph.nodes())
        displayed = [graph.nodes[node_id]["node"] for node_id in node_ids]

        fig = go.Figure()

        fig.add_trace(go.Scatter(
            x=edge_x, y=edge_y,
            mode="lines",
            line=dict(color="rgba(120, 120, 120, 0.5)", width=1),
            hoverinfo="none",
            name="Relationships",
        ))

        fig.add_trace(go.Scatter(
            x=edge_mid_x, y=edge_mid_y,
            mode="markers",
            marker=dict(size=4, color="rgba(120, 120, 120, 0.5)"),
            hovertext=edge_text,
            hovertemplate="%{hovertext}<extra></extra>",
            name="Relationship types",
        ))

        fig.add_trace(go.Scatter(
            x=[pos[node_id][0] for node_id in node_ids],
            y=[pos[node_id][1] for node_id in node_ids],
            mode="markers+text" if show_captions else "markers",
            marker=dict(
                size=[node.size / 2 for node in displayed],
                color=[node.color for node in displayed],
                line=dict(width=1, color="white"),
            ),
            text=[node.caption for node in displayed] if show_captions else None,
            textposition="bottom center",
            customdata=node_ids,
            hovertext=[
                f"<b>{node.primary_label or ''}</b><br>{node.caption}" for node in displayed
            ],
            hovertemplate="%{hovertext}<extra></extra>",
            name="Nodes",
        ))

        fig.update_layout(
            showlegend=False,
            xaxis=dict(showgrid=False, showticklabels=False, visible=False),
            yaxis=dict(showgrid=False, showticklabels=False, visible=False),
            margin=dict(l=20, r=20, b=20, t=20),
            height=self.height,
            hovermode="closest",
        )

        ranges = self.viewport(pos)
        if ranges is not None:
            (x_range, y_range) = ranges
            fig.update_xaxes(range=list(x_range))
            fig.update_yaxes(range=list(y_range))

        return fig

    def __repr__(self) -> str:
        return f"PlotlyGraphWidget(nodes={len(self.nodes)}, layout={self.layout}, zoom={self.scale:.2f})"
