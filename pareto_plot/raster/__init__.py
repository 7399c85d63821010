from .canvas import RGBA, draw_hline, draw_vline, fill_rect, new_canvas, stroke_rect
from .draw_lines import draw_dashed_hline, draw_polyline
from .draw_markers import draw_circle
from .draw_text import draw_text, text_size
from .layers import LayerCache

__all__ = [
    "RGBA",
    "LayerCache",
    "draw_circle",
    "draw_dashed_hline",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "stroke_rect",
    "text_size",
]
