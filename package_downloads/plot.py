from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence

AXIS_CROSS = "┼"
AXIS_TICK = "┤"
AXIS_GLYPHS = (AXIS_TICK, AXIS_CROSS)
LINE_FLAT = "─"
LINE_DOWN_END = "╰"
LINE_UP_END = "╭"
LINE_DOWN_START = "╮"
LINE_UP_START = "╯"
LINE_VERTICAL = "│"

DEFAULT_LABEL_WIDTH = 11

LabelFormatter = Callable[[float, int], str]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _default_format(value: float, _index: int) -> str:
    return f"{value:.2f}".rjust(DEFAULT_LABEL_WIDTH)


def scale_rows(series: Sequence[float], low: float, ratio: float) -> List[int]:
    """Map each value onto a row number counted upwards from the lowest row."""
    base = _round_half_up(low * ratio)
    return [_round_half_up(value * ratio) - base for value in series]


def render_gutter(labels: Sequence[str], axis: Sequence[str]) -> List[str]:
    """Build the left gutter: right-aligned label, space, axis glyph, space."""
    label_width = max((len(label) for label in labels), default=0)
    return [f"{label.rjust(label_width)} {glyph} " for label, glyph in zip(labels, axis)]


def plot(
    series: Sequence[float],
    height: Optional[int] = None,
    fmt: Optional[LabelFormatter] = None,
) -> str:
    """Render ``series`` as a multi-row ASCII line chart.

    Every row starts with a gutter holding the y-axis label from
    ``fmt(value, row)`` and an axis glyph followed by one space; the plot area
    after it has one column per step between consecutive values. The row of
    the first value carries a cross on the axis. All rows share the same
    length. A flat series collapses to a single row labelled with its value.
    """
    if not series:
        raise ValueError("Cannot plot an empty series.")
    if fmt is None:
        fmt = _default_format

    low = min(series)
    high = max(series)
    value_range = abs(high - low)
    if height is None:
        height = int(value_range)
    ratio = height / value_range if value_range else 1.0

    low_row = _round_half_up(low * ratio)
    high_row = _round_half_up(high * ratio)
    rows = abs(high_row - low_row)
    columns = len(series) - 1

    labels: List[str] = []
    axis: List[str] = []
    for index in range(rows + 1):
        label_value = high - index * value_range / rows if rows > 0 else high
        labels.append(fmt(label_value, index))
        axis.append(AXIS_CROSS if high_row - index == 0 else AXIS_TICK)

    scaled = scale_rows(series, low, ratio)
    axis[rows - scaled[0]] = AXIS_CROSS

    grid = [[" "] * columns for _ in range(rows + 1)]
    for column in range(columns):
        current = scaled[column]
        following = scaled[column + 1]
        if current == following:
            grid[rows - current][column] = LINE_FLAT
            continue
        if current > following:
            grid[rows - following][column] = LINE_DOWN_END
            grid[rows - current][column] = LINE_DOWN_START
        else:
            grid[rows - following][column] = LINE_UP_END
            grid[rows - current][column] = LINE_UP_START
        for between in range(min(current, following) + 1, max(current, following)):
            grid[rows - between][column] = LINE_VERTICAL

    gutter = render_gutter(labels, axis)
    return "\n".join(prefix + "".join(cells) for prefix, cells in zip(gutter, grid))
