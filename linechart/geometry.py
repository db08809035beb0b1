from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from linechart.config import ChartConfig
from linechart.series import ScreenPoint, Series, ValueRange


# NaN y coordinates of nonzero values are lifted this far above the baseline.
NAN_Y_OFFSET = 10.0


@dataclass(frozen=True)
class ChartBounds:
    width: float
    height: float
    graph_width: float
    graph_height: float
    padding: float

    @property
    def baseline(self) -> float:
        return self.graph_height


def calculate_sizes(width: float, height: float, config: ChartConfig) -> ChartBounds:
    if width <= 0 or height <= 0:
        raise ValueError("chart width/height must be > 0")
    graph_width = width - (config.side_space if config.show_side_labels else 0.0)
    graph_height = height - (config.bottom_space if config.show_bottom_labels else 0.0)
    return ChartBounds(
        width=float(width),
        height=float(height),
        graph_width=max(0.0, float(graph_width)),
        graph_height=max(0.0, float(graph_height)),
        padding=float(config.padding),
    )


def compute_value_range(series: Series) -> ValueRange:
    finite = series.values[np.isfinite(series.values)]
    if finite.size == 0:
        return ValueRange(min=None, max=None)
    return ValueRange(min=float(np.min(finite)), max=float(np.max(finite)))


def safe_coordinate(value: float, fallback: float) -> float:
    return fallback if math.isnan(value) else value


def safe_point(x: float, y: float, *, value: float, baseline: float) -> ScreenPoint:
    """Replace NaN coordinates before they reach a path or raster call.

    NaN x falls back to 0. NaN y falls back to the baseline for zero values and
    to just above it otherwise (NaN values count as nonzero).
    """
    safe_y = y
    if math.isnan(y):
        safe_y = baseline if value == 0 else baseline - NAN_Y_OFFSET
    return ScreenPoint(x=safe_coordinate(float(x), 0.0), y=float(safe_y))


def map_points(series: Series, value_range: ValueRange, bounds: ChartBounds) -> tuple[ScreenPoint, ...]:
    n = len(series)
    if n == 0:
        return ()
    height = bounds.graph_height
    spacing = bounds.graph_width / n
    xs = spacing * np.arange(n, dtype=np.float64)
    values = series.values

    if value_range.is_empty:
        ys = np.full(n, np.nan, dtype=np.float64)
    elif value_range.is_flat:
        ys = np.where(np.isfinite(values), height / 2.0, np.nan)
    else:
        assert value_range.min is not None and value_range.max is not None
        with np.errstate(invalid="ignore"):
            # halved operands keep the difference finite for ranges near float max
            frac = (values / 2.0 - value_range.min / 2.0) / (value_range.max / 2.0 - value_range.min / 2.0)
            ys = height - frac * height
            ys = np.where(ys < bounds.padding, bounds.padding, ys)
            ys = np.where(ys > height - bounds.padding, height - bounds.padding, ys)

    return tuple(
        safe_point(float(x), float(y), value=float(v), baseline=height)
        for x, y, v in zip(xs.tolist(), ys.tolist(), values.tolist(), strict=True)
    )
