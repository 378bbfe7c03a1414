from __future__ import annotations

import datetime
import math
from typing import Dict, List, Mapping, Sequence, Tuple

from .data import DAILY, MONTHLY, WEEKLY
from .plot import AXIS_GLYPHS

DEFAULT_GUTTER_WIDTH = 14
TARGET_LABEL_COUNT = 5


def _parse_key(key: str) -> datetime.date:
    parts = key.split("-")
    if len(parts) == 2:
        return datetime.date(int(parts[0]), int(parts[1]), 1)
    return datetime.date.fromisoformat(key)


def format_period_label(key: str, granularity: str) -> str:
    """Short x-axis label for a period key."""
    try:
        day = _parse_key(key)
    except ValueError:
        return key
    if granularity == DAILY:
        return f"{day.month:02d}/{day.day:02d}"
    if granularity == WEEKLY:
        return f"Wk {day.month:02d}/{day.day:02d}"
    if granularity == MONTHLY:
        return f"{day.month:02d}/{day.year % 100:02d}"
    return key


def measure_chart(chart: str) -> Tuple[int, int]:
    """Return ``(gutter_width, plot_width)`` of a rendered chart block.

    The gutter ends one column after the first axis glyph on the first line;
    when no glyph is found ``DEFAULT_GUTTER_WIDTH`` is assumed. The plot width
    is the widest line remainder once trailing spaces are dropped.
    """
    lines = chart.split("\n")
    first_line = lines[0] if lines else ""
    positions = [first_line.find(glyph) for glyph in AXIS_GLYPHS]
    found = [position for position in positions if position != -1]
    gutter = min(found) + 2 if found else DEFAULT_GUTTER_WIDTH

    plot_width = 0
    for line in lines:
        plot_width = max(plot_width, len(line[gutter:].rstrip(" ")))
    return gutter, plot_width


def label_indices(count: int, target: int = TARGET_LABEL_COUNT) -> List[int]:
    """Indices to label: both ends plus evenly spaced interior points."""
    if count <= 0:
        return []
    last = count - 1
    indices = [0] if last == 0 else [0, last]
    interval = count // (target - 1)
    if interval <= 0:
        return indices
    interior = [interval * step for step in range(1, target - 1)]
    return sorted(indices + [index for index in interior if 0 < index < last])


def label_position(index: int, count: int, label: str, width: int) -> int:
    if index == count - 1:
        return width - len(label)
    return math.floor(index / (count - 1) * (width - 1))


def _placement_order(indices: Sequence[int], count: int) -> List[int]:
    last = count - 1

    def rank(index: int) -> Tuple[int, int]:
        if index == 0:
            return (0, index)
        if index == last:
            return (1, index)
        return (2, index)

    return sorted(indices, key=rank)


def place_labels(labels: Mapping[int, str], count: int, width: int) -> str:
    """Lay labels into a line of ``width`` characters without overlap.

    The first and last labels claim their cells before any interior label,
    interior labels go in ascending index order, and a label is dropped when
    it would leave the line or touch a cell already taken.
    """
    buffer = [" "] * max(width, 0)
    claimed = [False] * len(buffer)
    for index in _placement_order(list(labels), count):
        label = labels[index]
        position = label_position(index, count, label, width)
        end = position + len(label)
        if position < 0 or end > width:
            continue
        if any(claimed[position:end]):
            continue
        buffer[position:end] = list(label)
        claimed[position:end] = [True] * len(label)
    return "".join(buffer)


def build_labels(keys: Sequence[str], granularity: str) -> Dict[int, str]:
    return {index: format_period_label(keys[index], granularity) for index in label_indices(len(keys))}


def render_x_axis(chart: str, keys: Sequence[str], granularity: str) -> str:
    """Render the x-axis line that sits directly under ``chart``."""
    gutter, plot_width = measure_chart(chart)
    labels = build_labels(keys, granularity)
    return " " * gutter + place_labels(labels, len(keys), plot_width)
