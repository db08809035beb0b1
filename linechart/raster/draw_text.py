from __future__ import annotations

from functools import lru_cache

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from linechart.raster.canvas import RGBA


DEFAULT_FONT_SIZE_PX = 10.0
FONT_CANDIDATES = ("DejaVuSans.ttf", "Arial.ttf", "Helvetica.ttc", "LiberationSans-Regular.ttf")


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    anchor: tuple[float, float] = (0.0, 0.0),
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int, int, int]:
    """Draw ``text`` so that the ``anchor`` fraction of its box lands on (x, y).

    Returns the (x, y, width, height) box the text occupies.
    """
    if not text:
        return (int(round(x)), int(round(y)), 0, 0)
    mask = _render_mask(text, _load_font(font_size_px))
    h, w = mask.shape
    left = int(round(x - anchor[0] * w))
    top = int(round(y - anchor[1] * h))
    _blend_mask(dst, left, top, mask, color)
    return (left, top, w, h)


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)

    patch[:, :, :3] = np.clip(np.rint(out_rgb_num / safe_alpha[:, :, None]), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)


@lru_cache(maxsize=256)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=32)
def _load_font(font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    for name in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size=size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)
