from __future__ import annotations

from typing import Sequence

import numpy as np

from pareto_plot.raster.canvas import RGBA, draw_pixel, fill_rect


def draw_polyline(dst: np.ndarray, vertices: Sequence[tuple[float, float]], color: RGBA, width: int = 1) -> None:
    if len(vertices) < 2:
        return
    points = [(int(round(x)), int(round(y))) for x, y in vertices]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        _draw_line_segment(dst, x0, y0, x1, y1, color=color, width=width)


def draw_dashed_hline(
    dst: np.ndarray,
    x0: int,
    x1: int,
    y: int,
    color: RGBA,
    *,
    width: int = 1,
    dash: tuple[int, int] = (6, 6),
) -> None:
    on, off = dash
    if on <= 0:
        return
    top = y - width // 2
    x = min(x0, x1)
    end = max(x0, x1)
    while x < end:
        fill_rect(dst, x, top, min(x + on, end), top + max(1, width), color)
        x += on + max(0, off)


def _draw_line_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    if width <= 1:
        draw_pixel(dst, x, y, color)
        return
    radius = width // 2
    fill_rect(dst, x - radius, y - radius, x + radius + 1, y + radius + 1, color)
