from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from linechart.curves import sample_cubic
from linechart.series import ChartType, ControlPointPair, ScreenPoint


@dataclass(frozen=True)
class MoveTo:
    point: ScreenPoint


@dataclass(frozen=True)
class LineTo:
    point: ScreenPoint


@dataclass(frozen=True)
class CurveTo:
    point: ScreenPoint
    control1: ScreenPoint
    control2: ScreenPoint


@dataclass(frozen=True)
class ClosePath:
    pass


PathCommand = MoveTo | LineTo | CurveTo | ClosePath


@dataclass
class ChartPath:
    commands: list[PathCommand] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.commands

    @property
    def is_closed(self) -> bool:
        return bool(self.commands) and isinstance(self.commands[-1], ClosePath)

    def move_to(self, point: ScreenPoint) -> None:
        self.commands.append(MoveTo(point))

    def line_to(self, point: ScreenPoint) -> None:
        self.commands.append(LineTo(point))

    def curve_to(self, point: ScreenPoint, control1: ScreenPoint, control2: ScreenPoint) -> None:
        self.commands.append(CurveTo(point, control1, control2))

    def close(self) -> None:
        self.commands.append(ClosePath())

    def flatten(self, steps_per_curve: int = 16) -> np.ndarray:
        """Vertices of the path as an (N, 2) float array, curves sampled uniformly."""
        out: list[np.ndarray] = []
        current: ScreenPoint | None = None
        for cmd in self.commands:
            if isinstance(cmd, MoveTo) or isinstance(cmd, LineTo):
                out.append(np.asarray([[cmd.point.x, cmd.point.y]], dtype=np.float64))
                current = cmd.point
            elif isinstance(cmd, CurveTo):
                start = current if current is not None else cmd.point
                out.append(sample_cubic(start, cmd.control1, cmd.control2, cmd.point, steps_per_curve))
                current = cmd.point
        if not out:
            return np.zeros((0, 2), dtype=np.float64)
        return np.concatenate(out, axis=0)


@dataclass(frozen=True)
class ChartPaths:
    stroke: ChartPath
    fill: ChartPath


def build_paths(
    points: Sequence[ScreenPoint],
    control_points: Sequence[ControlPointPair],
    chart_type: ChartType,
    *,
    baseline: float,
) -> ChartPaths:
    stroke = ChartPath()
    fill = ChartPath()
    if not points:
        return ChartPaths(stroke=stroke, fill=fill)
    curved = chart_type is ChartType.CURVED
    if curved and len(control_points) != len(points) - 1:
        raise ValueError(f"expected {len(points) - 1} control point pairs, got {len(control_points)}")

    fill.move_to(ScreenPoint(x=0.0, y=baseline))
    for index, point in enumerate(points):
        if index == 0:
            stroke.move_to(point)
            if curved:
                fill.curve_to(point, point, point)
            else:
                fill.line_to(point)
            continue
        if curved:
            pair = control_points[index - 1]
            stroke.curve_to(point, pair.first, pair.second)
            fill.curve_to(point, pair.first, pair.second)
        else:
            stroke.line_to(point)
            fill.line_to(point)

    final = ScreenPoint(x=points[-1].x, y=baseline)
    fill.curve_to(final, final, final)
    fill.close()
    return ChartPaths(stroke=stroke, fill=fill)
