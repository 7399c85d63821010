from __future__ import annotations

import numpy as np

from pareto_plot.raster.canvas import RGBA


def draw_circle(
    dst: np.ndarray,
    cx: float,
    cy: float,
    radius: float,
    fill: RGBA,
    *,
    stroke: RGBA | None = None,
    stroke_width: float = 0.0,
) -> None:
    """Filled circle with an optional ring centred on the circle's edge."""

    outer = radius + (stroke_width / 2.0 if stroke is not None else 0.0)
    if outer <= 0:
        return
    x0 = max(0, int(np.floor(cx - outer)))
    x1 = min(dst.shape[1], int(np.ceil(cx + outer)) + 1)
    y0 = max(0, int(np.floor(cy - outer)))
    y1 = min(dst.shape[0], int(np.ceil(cy + outer)) + 1)
    if x0 >= x1 or y0 >= y1:
        return

    yy, xx = np.mgrid[y0:y1, x0:x1]
    dist = np.hypot(xx + 0.5 - cx, yy + 0.5 - cy)
    view = dst[y0:y1, x0:x1]
    if stroke is not None and stroke_width > 0:
        inner = max(0.0, radius - stroke_width / 2.0)
        _paint(view, dist <= inner, fill)
        _paint(view, (dist > inner) & (dist <= outer), stroke)
    else:
        _paint(view, dist <= radius, fill)


def _paint(view: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    if not np.any(mask):
        return
    a = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32)
    current = view[mask][:, :3].astype(np.float32)
    blended = np.clip(src * a + current * (1.0 - a), 0, 255).astype(np.uint8)
    view[mask, :3] = blended
    view[mask, 3] = 255
