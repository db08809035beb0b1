from .canvas import apply_vertical_alpha, blit, draw_pixel, new_canvas
from .draw_lines import dash_segments, draw_line, draw_polyline
from .draw_text import draw_text
from .fill import fill_gradient, polygon_mask

__all__ = [
    "apply_vertical_alpha",
    "blit",
    "dash_segments",
    "draw_line",
    "draw_pixel",
    "draw_polyline",
    "draw_text",
    "fill_gradient",
    "new_canvas",
    "polygon_mask",
]
