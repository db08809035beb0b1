from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

from linechart.errors import ChartDataError
from linechart.layout import grid_count
from linechart.series import Series

if TYPE_CHECKING:
    from linechart.chart import LineChart


LOGGER = logging.getLogger(__name__)

DashPattern = tuple[float, ...]


class ChartDataSource(Protocol):
    def number_of_items(self, chart: "LineChart") -> int:
        ...

    def number_of_bottom_labels(self, chart: "LineChart") -> int:
        ...

    def number_of_side_labels(self, chart: "LineChart") -> int:
        ...

    def number_of_vertical_lines(self, chart: "LineChart") -> int:
        ...

    def number_of_horizontal_lines(self, chart: "LineChart") -> int:
        ...

    def x_value_at(self, chart: "LineChart", index: int) -> str:
        ...

    def y_value_at(self, chart: "LineChart", index: int) -> float:
        ...

    def vertical_dash_pattern_at(self, chart: "LineChart", index: int) -> Sequence[float]:
        ...

    def horizontal_dash_pattern_at(self, chart: "LineChart", index: int) -> Sequence[float]:
        """Index is 0-based, counted from the line nearest the baseline."""
        ...


class ChartDelegate(Protocol):
    def did_start_render(self, chart: "LineChart") -> None:
        ...

    def did_finish_render(self, chart: "LineChart") -> None:
        ...


class StaticDataSource:
    """In-memory data source over a fixed list of (label, value) pairs."""

    def __init__(
        self,
        pairs: Sequence[tuple[str, float]],
        *,
        bottom_labels: int = 6,
        side_labels: int = 5,
        vertical_lines: int = 6,
        horizontal_lines: int = 5,
        vertical_dash_pattern: Sequence[float] = (),
        horizontal_dash_pattern: Sequence[float] = (4.0, 4.0),
    ) -> None:
        self._pairs = [(str(label), value) for label, value in pairs]
        self._bottom_labels = bottom_labels
        self._side_labels = side_labels
        self._vertical_lines = vertical_lines
        self._horizontal_lines = horizontal_lines
        self._vertical_dash_pattern = tuple(vertical_dash_pattern)
        self._horizontal_dash_pattern = tuple(horizontal_dash_pattern)

    def number_of_items(self, chart: "LineChart") -> int:
        return len(self._pairs)

    def number_of_bottom_labels(self, chart: "LineChart") -> int:
        return self._bottom_labels

    def number_of_side_labels(self, chart: "LineChart") -> int:
        return self._side_labels

    def number_of_vertical_lines(self, chart: "LineChart") -> int:
        return self._vertical_lines

    def number_of_horizontal_lines(self, chart: "LineChart") -> int:
        return self._horizontal_lines

    def x_value_at(self, chart: "LineChart", index: int) -> str:
        return self._pairs[index][0]

    def y_value_at(self, chart: "LineChart", index: int) -> float:
        return self._pairs[index][1]

    def vertical_dash_pattern_at(self, chart: "LineChart", index: int) -> Sequence[float]:
        return self._vertical_dash_pattern

    def horizontal_dash_pattern_at(self, chart: "LineChart", index: int) -> Sequence[float]:
        return self._horizontal_dash_pattern


@dataclass(frozen=True)
class DataSnapshot:
    """Everything a render pass reads from the data source, pulled once up front."""

    series: Series
    bottom_label_count: int
    side_label_count: int
    vertical_dash_patterns: tuple[DashPattern, ...]
    horizontal_dash_patterns: tuple[DashPattern, ...]

    @property
    def vertical_line_count(self) -> int:
        return len(self.vertical_dash_patterns)

    @property
    def horizontal_line_count(self) -> int:
        return len(self.horizontal_dash_patterns)


def snapshot_data_source(source: ChartDataSource, chart: "LineChart") -> DataSnapshot:
    item_count = _coerce_count(source.number_of_items(chart), "number_of_items")
    labels = tuple(str(source.x_value_at(chart, i)) for i in range(item_count))
    values = np.empty(item_count, dtype=np.float64)
    for i in range(item_count):
        values[i] = _coerce_value(source.y_value_at(chart, i), index=i)
    series = Series(labels=labels, values=values)

    vertical = grid_count(item_count, _coerce_count(source.number_of_vertical_lines(chart), "number_of_vertical_lines"))
    horizontal = grid_count(
        item_count, _coerce_count(source.number_of_horizontal_lines(chart), "number_of_horizontal_lines")
    )
    snapshot = DataSnapshot(
        series=series,
        bottom_label_count=_coerce_count(source.number_of_bottom_labels(chart), "number_of_bottom_labels"),
        side_label_count=_coerce_count(source.number_of_side_labels(chart), "number_of_side_labels"),
        vertical_dash_patterns=tuple(
            _coerce_dash_pattern(source.vertical_dash_pattern_at(chart, i), "vertical", i) for i in range(vertical)
        ),
        horizontal_dash_patterns=tuple(
            _coerce_dash_pattern(source.horizontal_dash_pattern_at(chart, i), "horizontal", i)
            for i in range(horizontal)
        ),
    )
    LOGGER.debug(
        "snapshot taken; items=%d vertical_lines=%d horizontal_lines=%d",
        item_count,
        vertical,
        horizontal,
    )
    return snapshot


def _coerce_count(raw: Any, label: str) -> int:
    try:
        count = int(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} must be an integer, got {raw!r}") from exc
    if count < 0:
        LOGGER.warning("%s returned %d; treating as 0", label, count)
        return 0
    return count


def _coerce_value(raw: Any, *, index: int) -> float:
    if raw is None:
        return float("nan")
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"y value at index {index} is not numeric: {raw!r}") from exc


def _coerce_dash_pattern(raw: Sequence[float] | None, axis: str, index: int) -> DashPattern:
    if raw is None:
        return ()
    try:
        pattern = tuple(float(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{axis} dash pattern at index {index} is not numeric: {raw!r}") from exc
    if any(not np.isfinite(v) or v < 0 for v in pattern):
        raise ChartDataError(f"{axis} dash pattern at index {index} must contain finite lengths >= 0")
    if pattern and sum(pattern) <= 0:
        raise ChartDataError(f"{axis} dash pattern at index {index} must have a positive total length")
    return pattern
