from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class ChartType(Enum):
    LINEAR = 0
    CURVED = 1


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


@dataclass(frozen=True)
class ControlPointPair:
    first: ScreenPoint
    second: ScreenPoint


@dataclass(frozen=True)
class ValueRange:
    min: float | None
    max: float | None

    @property
    def is_empty(self) -> bool:
        return self.min is None or self.max is None

    @property
    def is_flat(self) -> bool:
        return not self.is_empty and self.min == self.max

    @property
    def span(self) -> float:
        if self.is_empty:
            return 0.0
        assert self.min is not None and self.max is not None
        return self.max - self.min


@dataclass(frozen=True)
class Series:
    """Immutable (label, value) snapshot taken at render start."""

    labels: tuple[str, ...]
    values: np.ndarray

    def __post_init__(self) -> None:
        if self.values.ndim != 1:
            raise ValueError("values must be 1-D")
        if len(self.labels) != self.values.size:
            raise ValueError(f"labels and values length mismatch: {len(self.labels)} != {self.values.size}")
        self.values.setflags(write=False)

    def __len__(self) -> int:
        return len(self.labels)

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, float]] | tuple[tuple[str, float], ...]) -> "Series":
        labels = tuple(str(label) for label, _ in pairs)
        values = np.asarray([float(value) for _, value in pairs], dtype=np.float64)
        return cls(labels=labels, values=values)
