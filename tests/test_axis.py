"""Tests for x-axis label formatting, measurement and placement."""

from __future__ import annotations

import pytest

from package_downloads.axis import (
    DEFAULT_GUTTER_WIDTH,
    format_period_label,
    label_indices,
    label_position,
    measure_chart,
    place_labels,
    render_x_axis,
)
from package_downloads.data import DAILY, MONTHLY, WEEKLY


@pytest.mark.parametrize(
    ("key", "granularity", "expected"),
    [
        ("2024-03-05", DAILY, "03/05"),
        ("2024-03-04", WEEKLY, "Wk 03/04"),
        ("2024-03", MONTHLY, "03/24"),
        ("2009-12", MONTHLY, "12/09"),
    ],
)
def test_format_period_label(key: str, granularity: str, expected: str) -> None:
    """Labels follow MM/DD, Wk MM/DD and MM/YY per granularity."""

    assert format_period_label(key, granularity) == expected


def test_format_period_label_passes_through_unparseable_keys() -> None:
    """Keys that are not dates are shown as-is."""

    assert format_period_label("n/a", DAILY) == "n/a"
    assert format_period_label("ab-cd", MONTHLY) == "ab-cd"


def test_label_indices_even_spacing() -> None:
    """Sixty periods get both anchors and three interior labels."""

    assert label_indices(60) == [0, 15, 30, 45, 59]


def test_label_indices_caps_interior_labels() -> None:
    """Short series never get more than five labels in total."""

    assert label_indices(7) == [0, 1, 2, 3, 6]
    assert label_indices(10) == [0, 2, 4, 6, 9]


@pytest.mark.parametrize(("count", "expected"), [(0, []), (1, [0]), (2, [0, 1]), (3, [0, 2])])
def test_label_indices_small_series(count: int, expected: list[int]) -> None:
    """Series too short for an interval still get their anchors."""

    assert label_indices(count) == expected


def test_label_position_right_anchors_last_label() -> None:
    """The final label ends exactly on the last column."""

    assert label_position(4, 5, "Wk 03/04", 40) == 32
    assert label_position(0, 5, "03/01", 40) == 0
    assert label_position(2, 5, "03/03", 40) == 19


def test_measure_chart_uses_axis_glyph() -> None:
    """The gutter ends one column past the separator glyph."""

    chart = "10 ┤ ──  \n 5 ┤ ─── "

    assert measure_chart(chart) == (5, 3)


def test_measure_chart_accepts_cross_on_first_line() -> None:
    """A cross on the first row still marks the gutter."""

    chart = "7 ┼ ╮\n1 ┤ ╰"

    assert measure_chart(chart) == (4, 1)


def test_measure_chart_falls_back_to_default_gutter() -> None:
    """Missing separators fall back to the default gutter width."""

    gutter, width = measure_chart("no axis here at all\nplain")

    assert gutter == DEFAULT_GUTTER_WIDTH
    assert width == len("no axis here at all") - DEFAULT_GUTTER_WIDTH


def test_place_labels_fits_all_when_spaced() -> None:
    """Five two-character labels on a ten-column axis tile exactly."""

    labels = {0: "a0", 1: "b1", 2: "c2", 3: "d3", 4: "e4"}

    assert place_labels(labels, 5, 10) == "a0b1c2d3e4"


def test_place_labels_drops_colliding_interior_labels() -> None:
    """Overlapping interior labels are dropped while the anchors stay."""

    labels = {0: "a00", 1: "b11", 2: "c22", 3: "d33", 4: "e44"}
    line = place_labels(labels, 5, 10)

    assert line == "a00 c22e44"
    assert line.startswith("a00")
    assert line.endswith("e44")
    assert "b11" not in line
    assert "d33" not in line


def test_place_labels_anchor_wins_over_interior_at_same_column() -> None:
    """An interior label that reaches into the end anchor's span is dropped."""

    labels = {0: "a0", 1: "b1", 2: "c2", 3: "d3", 4: "e4"}

    assert place_labels(labels, 5, 6) == "a0c2e4"


def test_place_labels_drops_labels_that_do_not_fit() -> None:
    """Nothing is written past the line width."""

    assert place_labels({0: "03/01"}, 1, 3) == "   "
    assert place_labels({0: "03/01"}, 1, 0) == ""


def test_place_labels_single_period_is_right_anchored() -> None:
    """A lone period is treated as the final label."""

    assert place_labels({0: "03/01"}, 1, 8) == "   03/01"


def test_place_labels_never_overlaps() -> None:
    """Every width keeps labels intact, inside the line and non-overlapping."""

    labels = {index: f"L{index:02d}xx" for index in label_indices(30)}
    for width in range(0, 40):
        line = place_labels(labels, 30, width)
        assert len(line) == width
        placed = [label for label in labels.values() if label in line]
        assert sum(len(label) for label in placed) == len(line.replace(" ", ""))
        if width >= 10:
            assert line.startswith(labels[0])
            assert line.endswith(labels[29])


def test_render_x_axis_prefixes_gutter() -> None:
    """The axis line is indented by the measured gutter."""

    chart = "9 ┤ ╭────\n1 ┼ ╯    "
    keys = ["2024-03", "2024-04", "2024-05", "2024-06", "2024-07", "2024-08"]

    assert render_x_axis(chart, keys, MONTHLY) == "    03/24"
