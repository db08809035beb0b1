from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import threading
import time

import numpy as np
from PIL import Image
import torch

from linechart.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)
MAGENTA = torch.tensor([255, 0, 255, 255], dtype=torch.uint8)


@dataclass(frozen=True)
class CommitEvent:
    event_id: int
    revision: int
    ts_ns: int


class ChartSurface:
    """RGBA255 surface that swaps in whole frames atomically."""

    def __init__(self, height: int, width: int, background: RGBA = (255, 255, 255, 255)) -> None:
        if height <= 0 or width <= 0:
            raise ValueError("height and width must be > 0")
        self.height = height
        self.width = width
        self._write_lock = threading.Lock()
        self._event_lock = threading.Lock()
        self._event_cv = threading.Condition(self._event_lock)
        self._events: deque[CommitEvent] = deque()
        self._next_event_id = 1
        self._revision = 0
        bg = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
        self._pixels = bg.expand(height, width, 4).clone()

    @property
    def revision(self) -> int:
        return self._revision

    def read_snapshot(self) -> torch.Tensor:
        with self._write_lock:
            return self._pixels.clone()

    def to_numpy(self) -> np.ndarray:
        return self.read_snapshot().numpy()

    def commit_frame(self, frame_rgba: np.ndarray) -> CommitEvent:
        if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
            raise ValueError("frame_rgba must have shape (H, W, 4)")
        tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
        staged, offending = _sanitize_rgba_tensor(tensor, (self.height, self.width, 4))
        if offending > 0:
            LOGGER.warning("ChartSurface commit sanitized invalid RGBA channels; offending_pixels=%d", offending)

        with self._write_lock:
            self._pixels = staged
            self._revision += 1
            event = CommitEvent(event_id=self._next_event_id, revision=self._revision, ts_ns=time.time_ns())
            self._next_event_id += 1

        with self._event_cv:
            self._events.append(event)
            self._event_cv.notify_all()
        return event

    def pop_commit(self, timeout: float | None = None) -> CommitEvent | None:
        with self._event_cv:
            if not self._events:
                if timeout is None:
                    return None
                self._event_cv.wait(timeout=timeout)
            if not self._events:
                return None
            return self._events.popleft()

    def save_png(self, path: str) -> None:
        Image.fromarray(self.to_numpy()).save(path)


def _sanitize_rgba_tensor(value: torch.Tensor, expected_shape: tuple[int, ...]) -> tuple[torch.Tensor, int]:
    if tuple(value.shape) != expected_shape:
        raise ValueError(f"frame has invalid shape: {tuple(value.shape)} expected {expected_shape}")
    if value.dtype == torch.uint8:
        return value.clone(), 0
    raw = value.to(torch.float32)
    invalid = ~torch.isfinite(raw) | (raw < 0) | (raw > 255)
    invalid_pixels = int(torch.any(invalid, dim=-1).sum().item())
    clamped = torch.clamp(torch.nan_to_num(raw, nan=0.0), 0, 255).to(torch.uint8)
    if invalid_pixels > 0:
        clamped[torch.any(invalid, dim=-1)] = MAGENTA
    return clamped, invalid_pixels
