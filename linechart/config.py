from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import tomllib
from typing import Any

from linechart.series import ChartType


RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class ChartConfig:
    """Presentation options, read once at the start of every render."""

    grid_width: float = 0.3
    line_width: float = 3.0
    side_space: float = 44.0
    bottom_space: float = 44.0
    padding: float = 16.0
    show_vertical_grid: bool = True
    show_horizontal_grid: bool = True
    show_bottom_labels: bool = True
    show_side_labels: bool = True
    grid_color: RGBA = (128, 128, 128, 255)
    labels_color: RGBA = (0, 0, 0, 255)
    tint_color: RGBA = (0, 122, 255, 255)
    background_color: RGBA = (255, 255, 255, 255)
    label_font_size: float = 10.0
    animation_duration: float = 0.3
    chart_type: ChartType = ChartType.LINEAR

    def __post_init__(self) -> None:
        if self.grid_width <= 0:
            raise ValueError("grid_width must be > 0")
        if self.line_width <= 0:
            raise ValueError("line_width must be > 0")
        if self.side_space < 0 or self.bottom_space < 0:
            raise ValueError("side_space/bottom_space must be >= 0")
        if self.padding < 0:
            raise ValueError("padding must be >= 0")
        if self.label_font_size <= 0:
            raise ValueError("label_font_size must be > 0")
        if self.animation_duration < 0:
            raise ValueError("animation_duration must be >= 0")
        if not isinstance(self.chart_type, ChartType):
            raise ValueError(f"chart_type must be a ChartType, got {self.chart_type!r}")
        for name in ("grid_color", "labels_color", "tint_color", "background_color"):
            _validate_rgba(getattr(self, name), name)

    def enabled_task_count(self) -> int:
        # axis and data path are always drawn
        flags = (self.show_vertical_grid, self.show_horizontal_grid, self.show_side_labels, self.show_bottom_labels)
        return 2 + sum(1 for flag in flags if flag)


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", raw)
    if not isinstance(table, dict):
        raise ValueError("[chart] must be a table")
    return chart_config_from_mapping(table)


def chart_config_from_mapping(raw: dict[str, Any]) -> ChartConfig:
    known = {f.name for f in fields(ChartConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"unknown chart config keys: {', '.join(unknown)}")
    kwargs: dict[str, Any] = {}
    for key, value in raw.items():
        if key == "chart_type":
            kwargs[key] = _coerce_chart_type(value)
        elif key.endswith("_color"):
            kwargs[key] = _coerce_rgba(value, key)
        elif key.startswith("show_"):
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be a boolean")
            kwargs[key] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{key} must be a number")
            kwargs[key] = float(value)
    return ChartConfig(**kwargs)


def _coerce_chart_type(value: Any) -> ChartType:
    if isinstance(value, ChartType):
        return value
    if isinstance(value, str):
        try:
            return ChartType[value.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"unsupported chart_type: {value}") from exc
    raise ValueError(f"chart_type must be 'linear' or 'curved', got {value!r}")


def _coerce_rgba(value: Any, label: str) -> RGBA:
    if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
        raise ValueError(f"{label} must be a list of 3 or 4 channel values")
    channels = [int(v) for v in value]
    if len(channels) == 3:
        channels.append(255)
    rgba = (channels[0], channels[1], channels[2], channels[3])
    _validate_rgba(rgba, label)
    return rgba


def _validate_rgba(value: tuple[int, ...], label: str) -> None:
    if len(value) != 4 or any(int(c) < 0 or int(c) > 255 for c in value):
        raise ValueError(f"{label} must be an RGBA tuple with channels in [0, 255]")
