"""Tests for SchemeAssigner class."""

import pytest

from graph_view.scheme import DEFAULT_PALETTE, SchemeAssigner


def test_assign_new_label():
    """Test a new label gets the first palette color."""
    assigner = SchemeAssigner()

    color, scheme = assigner.assign("Document", {})
    assert color == DEFAULT_PALETTE[0]
    assert scheme == {"Document": DEFAULT_PALETTE[0]}


def test_assign_existing_label():
    """Test an existing label keeps its color."""
    assigner = SchemeAssigner()
    existing = {"Document": "#123456"}

    color, scheme = assigner.assign("Document", existing)
    assert color == "#123456"
    assert scheme == existing


def test_assign_does_not_mutate_input():
    """Test the input scheme is left untouched."""
    assigner = SchemeAssigner()
    existing = {"Document": DEFAULT_PALETTE[0]}

    _, scheme = assigner.assign("Chunk", existing)
    assert existing == {"Document": DEFAULT_PALETTE[0]}
    assert scheme is not existing
    assert scheme["Chunk"] == DEFAULT_PALETTE[1]


def test_skips_colors_already_used():
    """Test a new label never reuses a taken color while the palette lasts."""
    assigner = SchemeAssigner(palette=["#a", "#b", "#c"])

    color, _ = assigner.assign("New", {"Old": "#a"})
    assert color == "#b"


def test_palette_exhaustion_cycles():
    """Test colors repeat with a positional offset once the palette runs out."""
    assigner = SchemeAssigner(palette=["#a", "#b"])

    scheme = assigner.assign_all(["L1", "L2", "L3", "L4", "L5"])
    assert scheme == {"L1": "#a", "L2": "#b", "L3": "#a", "L4": "#b", "L5": "#a"}


def test_assign_all_is_stable_across_calls():
    """Test threading the scheme forward never recolors a label."""
    assigner = SchemeAssigner()

    first = assigner.assign_all(["Document", "Chunk"])
    second = assigner.assign_all(["Person", "Chunk", "Document"], first)

    assert second["Document"] == first["Document"]
    assert second["Chunk"] == first["Chunk"]
    assert second["Person"] not in {first["Document"], first["Chunk"]}
    assert list(second) == ["Document", "Chunk", "Person"]


def test_many_labels_never_raise():
    """Test an unbounded number of labels gets colors."""
    assigner = SchemeAssigner()
    scheme = assigner.assign_all(f"Label{i}" for i in range(100))
    assert len(scheme) == 100
    assert set(scheme.values()) == set(DEFAULT_PALETTE)


def test_empty_palette_rejected():
    """Test the palette must not be empty."""
    with pytest.raises(ValueError):
        SchemeAssigner(palette=[])
