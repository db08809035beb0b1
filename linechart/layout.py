from __future__ import annotations

from dataclasses import dataclass
import math

from linechart.formatting import format_compact_values
from linechart.geometry import safe_point
from linechart.series import ScreenPoint, Series, ValueRange


@dataclass(frozen=True)
class GridLine:
    index: int
    start: ScreenPoint
    end: ScreenPoint
    dash_pattern: tuple[float, ...] = ()


@dataclass(frozen=True)
class GridSpec:
    count: int
    spacing: float
    lines: tuple[GridLine, ...]


@dataclass(frozen=True)
class LabelPlacement:
    text: str
    position: ScreenPoint
    # fraction of the label box that sits on ``position`` (x, y)
    anchor: tuple[float, float]


def grid_count(item_count: int, requested: int) -> int:
    return max(0, min(item_count, requested))


def vertical_grid(
    item_count: int,
    requested: int,
    *,
    graph_width: float,
    graph_height: float,
    dash_patterns: tuple[tuple[float, ...], ...] = (),
) -> GridSpec:
    count = grid_count(item_count, requested)
    if count == 0:
        return GridSpec(count=0, spacing=0.0, lines=())
    spacing = graph_width / count
    lines = tuple(
        GridLine(
            index=i,
            start=_safe(spacing * i, 0.0, baseline=graph_height),
            end=_safe(spacing * i, graph_height, baseline=graph_height),
            dash_pattern=_pattern_at(dash_patterns, i),
        )
        for i in range(count)
    )
    return GridSpec(count=count, spacing=spacing, lines=lines)


def horizontal_grid(
    item_count: int,
    requested: int,
    *,
    graph_width: float,
    graph_height: float,
    dash_patterns: tuple[tuple[float, ...], ...] = (),
) -> GridSpec:
    """Lines stacked up from the baseline; line i (0-based, bottom first) takes dash_patterns[i]."""
    count = grid_count(item_count, requested)
    if count == 0:
        return GridSpec(count=0, spacing=0.0, lines=())
    spacing = graph_height / count
    lines = []
    for i in range(count):
        y = graph_height - spacing * (i + 1)
        lines.append(
            GridLine(
                index=i,
                start=_safe(0.0, y, baseline=graph_height),
                end=_safe(graph_width, y, baseline=graph_height),
                dash_pattern=_pattern_at(dash_patterns, i),
            )
        )
    return GridSpec(count=count, spacing=spacing, lines=tuple(lines))


def axis_lines(*, graph_width: float, graph_height: float) -> tuple[GridLine, GridLine]:
    value_axis = GridLine(
        index=0,
        start=_safe(graph_width, 0.0, baseline=graph_height),
        end=_safe(graph_width, graph_height, baseline=graph_height),
    )
    category_axis = GridLine(
        index=1,
        start=_safe(0.0, graph_height, baseline=graph_height),
        end=_safe(graph_width, graph_height, baseline=graph_height),
    )
    return value_axis, category_axis


def side_label_values(value_range: ValueRange, requested: int) -> list[float]:
    """Evenly spaced values from min up to and including max, ascending.

    Max is appended explicitly so it is present even when the stride does not
    land on it exactly.
    """
    if requested <= 0 or value_range.is_empty:
        return []
    assert value_range.min is not None and value_range.max is not None
    if value_range.is_flat:
        return [value_range.max]
    values: list[float] = []
    for k in range(requested):
        t = k / requested
        value = value_range.min * (1.0 - t) + value_range.max * t
        if value >= value_range.max:
            break
        values.append(value)
    values.append(value_range.max)
    return sorted(values)


def side_labels(
    value_range: ValueRange,
    requested: int,
    *,
    width: float,
    side_space: float,
    graph_height: float,
) -> tuple[LabelPlacement, ...]:
    values = side_label_values(value_range, requested)
    if not values:
        return ()
    texts = format_compact_values(values)
    spacing = graph_height / len(values)
    x = width - side_space / 2.0
    return tuple(
        LabelPlacement(
            text=text,
            position=_safe(x, graph_height - i * spacing, baseline=graph_height, value=value),
            anchor=(0.5, 0.8),
        )
        for i, (value, text) in enumerate(zip(values, texts, strict=True))
    )


def bottom_label_indices(item_count: int, requested: int) -> list[int]:
    if item_count <= 0 or requested <= 0:
        return []
    stride = max(1, math.ceil(item_count / requested))
    return list(range(0, item_count, stride))


def bottom_labels(
    series: Series,
    requested: int,
    *,
    graph_width: float,
    graph_height: float,
    padding: float,
) -> tuple[LabelPlacement, ...]:
    indices = bottom_label_indices(len(series), requested)
    if not indices:
        return ()
    spacing = graph_width / len(indices)
    return tuple(
        LabelPlacement(
            text=series.labels[index],
            position=_safe(spacing * i, graph_height + padding, baseline=graph_height),
            anchor=(0.0, 0.0),
        )
        for i, index in enumerate(indices)
    )


def _pattern_at(patterns: tuple[tuple[float, ...], ...], index: int) -> tuple[float, ...]:
    return patterns[index] if index < len(patterns) else ()


def _safe(x: float, y: float, *, baseline: float, value: float = 0.0) -> ScreenPoint:
    return safe_point(x, y, value=value, baseline=baseline)
