from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from linechart.series import ControlPointPair, ScreenPoint


def solve_control_points(
    points: Sequence[ScreenPoint],
    *,
    max_y: float | None = None,
) -> tuple[ControlPointPair, ...]:
    """Bezier control points for a smooth curve through every point.

    Tangents follow Catmull-Rom: central differences at interior points and
    one-sided differences at both ends. Segment ``i`` gets ``P[i] + m[i] / 3``
    and ``P[i + 1] - m[i + 1] / 3``, so adjacent segments share a tangent
    direction at each interior point. When ``max_y`` is given the first control
    point of each segment is kept at or above it on screen.
    """
    n = len(points)
    if n < 2:
        return ()
    pts = np.asarray([(p.x, p.y) for p in points], dtype=np.float64)

    tangents = np.empty_like(pts)
    tangents[0] = pts[1] - pts[0]
    tangents[-1] = pts[-1] - pts[-2]
    if n > 2:
        tangents[1:-1] = (pts[2:] - pts[:-2]) / 2.0

    firsts = pts[:-1] + tangents[:-1] / 3.0
    seconds = pts[1:] - tangents[1:] / 3.0
    if max_y is not None:
        np.minimum(firsts[:, 1], max_y, out=firsts[:, 1])

    return tuple(
        ControlPointPair(first=ScreenPoint(x=float(f[0]), y=float(f[1])), second=ScreenPoint(x=float(s[0]), y=float(s[1])))
        for f, s in zip(firsts, seconds, strict=True)
    )


def evaluate_segment(start: ScreenPoint, pair: ControlPointPair, end: ScreenPoint, t: float) -> ScreenPoint:
    u = 1.0 - t
    b0 = u * u * u
    b1 = 3.0 * u * u * t
    b2 = 3.0 * u * t * t
    b3 = t * t * t
    return ScreenPoint(
        x=b0 * start.x + b1 * pair.first.x + b2 * pair.second.x + b3 * end.x,
        y=b0 * start.y + b1 * pair.first.y + b2 * pair.second.y + b3 * end.y,
    )


def sample_cubic(start: ScreenPoint, c1: ScreenPoint, c2: ScreenPoint, end: ScreenPoint, steps: int) -> np.ndarray:
    """Points along one cubic at ``steps`` evenly spaced t values in (0, 1]."""
    if steps <= 0:
        raise ValueError("steps must be > 0")
    t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)[1:, None]
    u = 1.0 - t
    ctrl = np.asarray([(start.x, start.y), (c1.x, c1.y), (c2.x, c2.y), (end.x, end.y)], dtype=np.float64)
    return u**3 * ctrl[0] + 3.0 * u**2 * t * ctrl[1] + 3.0 * u * t**2 * ctrl[2] + t**3 * ctrl[3]
