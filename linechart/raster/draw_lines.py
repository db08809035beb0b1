from __future__ import annotations

from collections.abc import Sequence
import math

import numpy as np

from linechart.raster.canvas import RGBA, draw_pixel


# runs past this count are drawn solid
MAX_DASH_RUNS = 4096


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: float = 1.0) -> None:
    if xs.size < 2:
        return
    brush, brush_color = _brush(width, color)
    for i in range(xs.size - 1):
        _draw_line_segment(
            dst,
            int(round(xs[i])),
            int(round(ys[i])),
            int(round(xs[i + 1])),
            int(round(ys[i + 1])),
            color=brush_color,
            width=brush,
        )


def draw_line(
    dst: np.ndarray,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    color: RGBA,
    width: float = 1.0,
    dash_pattern: Sequence[float] = (),
) -> None:
    if not dash_pattern:
        draw_polyline(dst, np.asarray([x0, x1]), np.asarray([y0, y1]), color=color, width=width)
        return
    for sx, sy, ex, ey in dash_segments(x0, y0, x1, y1, dash_pattern):
        draw_polyline(dst, np.asarray([sx, ex]), np.asarray([sy, ey]), color=color, width=width)


def dash_segments(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    dash_pattern: Sequence[float],
) -> list[tuple[float, float, float, float]]:
    """Split a segment into the "on" runs of an on/off dash pattern."""
    length = math.hypot(x1 - x0, y1 - y0)
    total = float(sum(dash_pattern))
    if length == 0 or total <= 0:
        return [(x0, y0, x1, y1)]
    ux = (x1 - x0) / length
    uy = (y1 - y0) / length
    out: list[tuple[float, float, float, float]] = []
    pos = 0.0
    i = 0
    while pos < length:
        if i >= MAX_DASH_RUNS:
            out.append((x0 + ux * pos, y0 + uy * pos, x1, y1))
            break
        run = float(dash_pattern[i % len(dash_pattern)])
        end = min(length, pos + run)
        if i % 2 == 0 and end > pos:
            out.append((x0 + ux * pos, y0 + uy * pos, x0 + ux * end, y0 + uy * end))
        pos = end
        i += 1
    return out


def _brush(width: float, color: RGBA) -> tuple[int, RGBA]:
    # hairlines keep one pixel and fade out instead of disappearing
    if width < 1.0:
        return 1, (color[0], color[1], color[2], int(round(color[3] * max(0.0, width))))
    return int(round(width)), color


def _draw_line_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    y_lo = max(0, y - radius)
    y_hi = min(dst.shape[0], y + radius + 1)
    x_lo = max(0, x - radius)
    x_hi = min(dst.shape[1], x + radius + 1)
    if y_lo >= y_hi or x_lo >= x_hi:
        return
    if color[3] == 255:
        dst[y_lo:y_hi, x_lo:x_hi] = color
        return
    for yy in range(y_lo, y_hi):
        for xx in range(x_lo, x_hi):
            draw_pixel(dst, xx, yy, color)
