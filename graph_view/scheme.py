"""Label to color scheme assignment.

A scheme maps node labels to colors. It only ever grows: once a label has a
color it keeps it for the whole session, however many times the graph is
reloaded. Schemes are passed in and returned, never mutated in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


Scheme = dict[str, str]

DEFAULT_PALETTE: tuple[str, ...] = (
    "#1976d2",  # blue
    "#f57c00",  # orange
    "#388e3c",  # green
    "#7b1fa2",  # purple
    "#c2185b",  # pink
    "#00695c",  # teal
    "#ffa000",  # amber
    "#3f51b5",  # indigo
    "#5d4037",  # brown
    "#689f38",  # lime
    "#0277bd",  # cyan
    "#d32f2f",  # red
    "#827717",  # olive
    "#6a1b9a",  # violet
    "#424242",  # dark grey
    "#1890ff",  # bright blue
)


class SchemeAssigner:
    """Assigns stable colors to labels from a fixed palette."""

    def __init__(self, palette: Iterable[str] = DEFAULT_PALETTE) -> None:
        """Initialize the assigner.

        Args:
            palette: Ordered colors handed out to new labels
        """
        self.palette = tuple(palette)
        if not self.palette:
            raise ValueError("palette must contain at least one color")

    def next_color(self, scheme: Mapping[str, str]) -> str:
        """Pick the color for the next new label of a scheme.

        The first palette color not yet used wins. When the palette is
        exhausted colors repeat, offset by the number of assigned labels.

        Args:
            scheme: Current scheme

        Returns:
            Color for a label not yet in the scheme
        """
        used = set(scheme.values())
        for color in self.palette:
            if color not in used:
                return color
        return self.palette[len(scheme) % len(self.palette)]

    def assign(self, label: str, scheme: Mapping[str, str] | None = None) -> tuple[str, Scheme]:
        """Get the color of a label, extending the scheme if needed.

        Args:
            label: Node label or relationship type
            scheme: Existing scheme (not modified)

        Returns:
            Tuple of (color, updated_scheme)
        """
        updated = dict(scheme or {})
        if label in updated:
            return updated[label], updated

        color = self.next_color(updated)
        updated[label] = color
        return color, updated

    def assign_all(
        self,
        labels: Iterable[str],
        scheme: Mapping[str, str] | None = None,
    ) -> Scheme:
        """Thread a sequence of labels through the scheme.

        Args:
            labels: Labels in first-seen order
            scheme: Existing scheme (not modified)

        Returns:
            Scheme containing every label
        """
        updated = dict(scheme or {})
        for label in labels:
            if label not in updated:
                updated[label] = self.next_color(updated)
        return updated

    def __repr__(self) -> str:
        return f"SchemeAssigner(palette={len(self.palette)} colors)"
