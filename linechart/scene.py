from __future__ import annotations

import bisect
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
import threading

import numpy as np

from linechart.layout import GridLine, LabelPlacement
from linechart.paths import ChartPaths
from linechart.raster import blit, new_canvas
from linechart.raster.canvas import RGBA


class LayerSlot(IntEnum):
    """Paint order; later slots are drawn over earlier ones."""

    AXIS = 0
    VERTICAL_GRID = 1
    HORIZONTAL_GRID = 2
    SIDE_LABELS = 3
    BOTTOM_LABELS = 4
    DATA = 5


@dataclass(frozen=True)
class AnimationSpec:
    key_path: str
    from_value: float
    to_value: float
    duration: float
    timing: str = "linear"


@dataclass
class LayerNode:
    slot: LayerSlot
    rgba: np.ndarray | None = None
    order: int = 0
    children: list["LayerNode"] = field(default_factory=list)
    lines: tuple[GridLine, ...] = ()
    labels: tuple[LabelPlacement, ...] = ()
    paths: ChartPaths | None = None
    animations: tuple[AnimationSpec, ...] = ()

    def insert_child(self, child: "LayerNode") -> None:
        # children stay sorted by ``order`` whatever order they arrive in
        keys = [c.order for c in self.children]
        self.children.insert(bisect.bisect_right(keys, child.order), child)

    def composite_into(self, dst: np.ndarray) -> None:
        if self.rgba is not None:
            blit(dst, self.rgba)
        for child in self.children:
            child.composite_into(dst)


class SceneTree:
    """Layer tree with one fixed position per slot."""

    def __init__(self) -> None:
        self._slots: list[LayerNode | None] = [None] * len(LayerSlot)

    def place(self, node: LayerNode) -> None:
        if self._slots[node.slot] is not None:
            raise ValueError(f"slot already filled: {node.slot.name}")
        self._slots[node.slot] = node

    def get(self, slot: LayerSlot) -> LayerNode | None:
        return self._slots[slot]

    def layers(self) -> list[LayerNode]:
        return [node for node in self._slots if node is not None]

    @property
    def slots(self) -> list[LayerSlot]:
        return [node.slot for node in self.layers()]

    @property
    def is_empty(self) -> bool:
        return not any(_has_content(node) for node in self.layers())

    def composite(self, width: int, height: int, background: RGBA) -> np.ndarray:
        frame = new_canvas(width, height, background)
        for node in self.layers():
            node.composite_into(frame)
        return frame


def _has_content(node: LayerNode) -> bool:
    if node.lines or node.labels:
        return True
    if node.paths is not None and not node.paths.stroke.is_empty:
        return True
    return any(_has_content(child) for child in node.children)


class JoinBarrier:
    """Counts outstanding tasks and runs callbacks once every entered task has left."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outstanding = 0
        self._entered = 0
        self._left = 0
        self._callbacks: list[Callable[[], None]] = []

    @property
    def entered(self) -> int:
        with self._lock:
            return self._entered

    @property
    def left(self) -> int:
        with self._lock:
            return self._left

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    def enter(self, count: int = 1) -> None:
        if count <= 0:
            raise ValueError("count must be > 0")
        with self._lock:
            self._outstanding += count
            self._entered += count

    def leave(self) -> None:
        with self._lock:
            if self._outstanding <= 0:
                raise RuntimeError("unbalanced JoinBarrier.leave()")
            self._outstanding -= 1
            self._left += 1
            ready = self._take_callbacks_locked()
        for callback in ready:
            callback()

    def notify(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the barrier drains (immediately if it already has)."""
        with self._lock:
            self._callbacks.append(callback)
            ready = self._take_callbacks_locked()
        for cb in ready:
            cb()

    def _take_callbacks_locked(self) -> list[Callable[[], None]]:
        if self._outstanding > 0 or not self._callbacks:
            return []
        ready = self._callbacks
        self._callbacks = []
        return ready
