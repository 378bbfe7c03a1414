from __future__ import annotations

import math
from typing import Sequence

from .axis import render_x_axis
from .data import Period
from .plot import LabelFormatter, plot

DEFAULT_CHART_HEIGHT = 20


def count_formatter(values: Sequence[float]) -> LabelFormatter:
    """Y-axis formatter printing whole counts padded to the widest value."""
    width = len(str(math.floor(max(values))))

    def _format(value: float, _index: int) -> str:
        return str(math.floor(value)).rjust(width)

    return _format


def render_download_chart(periods: Sequence[Period], granularity: str, height: int = DEFAULT_CHART_HEIGHT) -> str:
    """Plot period values and append the aligned x-axis line."""
    if not periods:
        raise ValueError("Cannot chart an empty series.")
    values = [period.value for period in periods]
    body = plot(values, height=height, fmt=count_formatter(values))
    axis_line = render_x_axis(body, [period.key for period in periods], granularity)
    return f"{body}\n{axis_line}"
