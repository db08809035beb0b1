from __future__ import annotations

import numpy as np
from PIL import Image, ImageDraw

from linechart.raster.canvas import RGBA, apply_vertical_alpha, blit


def polygon_mask(vertices: np.ndarray, width: int, height: int) -> np.ndarray:
    """uint8 coverage mask (H, W) of the closed polygon through ``vertices``."""
    image = Image.new("L", (width, height), 0)
    if vertices.shape[0] >= 3:
        points = [(float(x), float(y)) for x, y in vertices.tolist()]
        ImageDraw.Draw(image).polygon(points, fill=255)
    return np.asarray(image, dtype=np.uint8)


def fill_gradient(
    dst: np.ndarray,
    vertices: np.ndarray,
    color: RGBA,
    *,
    top_alpha: float,
    bottom_alpha: float,
) -> None:
    """Fill a polygon with ``color`` fading linearly from ``top_alpha`` to ``bottom_alpha``."""
    height, width = dst.shape[0], dst.shape[1]
    mask = polygon_mask(vertices, width, height)
    if not np.any(mask):
        return
    layer = np.zeros((height, width, 4), dtype=np.uint8)
    layer[:, :, :3] = np.asarray(color[:3], dtype=np.uint8)
    layer[:, :, 3] = (mask.astype(np.float32) * (color[3] / 255.0)).astype(np.uint8)
    apply_vertical_alpha(layer, top_alpha, bottom_alpha)
    blit(dst, layer)
