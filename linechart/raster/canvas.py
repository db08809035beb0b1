from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)


def new_canvas(width: int, height: int, color: RGBA = TRANSPARENT) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blit(dst: np.ndarray, src: np.ndarray, x0: int = 0, y0: int = 0) -> None:
    """Composite ``src`` over ``dst`` in place (straight alpha)."""
    h, w, _ = src.shape
    y1 = min(dst.shape[0], y0 + h)
    x1 = min(dst.shape[1], x0 + w)
    if y0 >= y1 or x0 >= x1:
        return

    view = dst[y0:y1, x0:x1]
    patch = src[: y1 - y0, : x1 - x0]
    src_a = patch[:, :, 3:4].astype(np.float32) / 255.0
    if not np.any(src_a > 0):
        return
    dst_a = view[:, :, 3:4].astype(np.float32) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)
    num = patch[:, :, :3].astype(np.float32) * src_a + view[:, :, :3].astype(np.float32) * dst_a * (1.0 - src_a)
    safe_a = np.where(out_a > 1e-6, out_a, 1.0)
    view[:, :, :3] = np.clip(np.rint(num / safe_a), 0, 255).astype(np.uint8)
    view[:, :, 3:4] = np.clip(np.rint(out_a * 255.0), 0, 255).astype(np.uint8)


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    src = np.zeros((1, 1, 4), dtype=np.uint8)
    src[0, 0] = color
    blit(dst, src, x, y)


def apply_vertical_alpha(dst: np.ndarray, top: float, bottom: float) -> None:
    """Scale the alpha channel by a linear ramp from ``top`` (row 0) to ``bottom`` (last row)."""
    height = dst.shape[0]
    if height == 0:
        return
    ramp = np.linspace(top, bottom, height, dtype=np.float32).reshape(height, 1)
    dst[:, :, 3] = np.clip(dst[:, :, 3].astype(np.float32) * ramp, 0, 255).astype(np.uint8)
