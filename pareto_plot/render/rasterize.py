from __future__ import annotations

import numpy as np

from pareto_plot.config import hex_to_rgba
from pareto_plot.raster import (
    draw_circle,
    draw_dashed_hline,
    draw_hline,
    draw_polyline,
    draw_text,
    draw_vline,
    fill_rect,
    new_canvas,
    stroke_rect,
    text_size,
)
from pareto_plot.render.elements import AverageLineElement, AxisElement, BarElement
from pareto_plot.render.state import RenderState
from pareto_plot.scales import Viewport


TICK_SIZE = 6
TICK_PADDING = 3

Rect = tuple[int, int, int, int]


def rasterize(state: RenderState, background: str = "#FFFFFF", *, viewport: Viewport | None = None) -> np.ndarray:
    """Composite ``state`` into an ``(H, W, 4)`` uint8 RGBA frame.

    Axes sit in a cached base layer under the data so unchanged axes are not
    re-rendered; bars, the average line, the pareto line and markers follow.
    """

    if viewport is None:
        viewport = state.scales.viewport if state.scales is not None else Viewport(0, 0)
    width = int(round(viewport.width))
    height = int(round(viewport.height))
    frame = _base_layer(state, width, height, background)

    for bar in state.bars:
        draw_bar(frame, bar)
    if state.average_line is not None:
        _draw_average_line(frame, state.average_line)
    line = state.line
    if len(line.vertices) >= 2:
        draw_polyline(frame, line.vertices, hex_to_rgba(line.stroke), width=max(1, int(round(line.stroke_width))))
    for marker in state.markers:
        draw_circle(
            frame,
            marker.cx,
            marker.cy,
            marker.radius,
            hex_to_rgba(marker.fill),
            stroke=hex_to_rgba(marker.stroke),
            stroke_width=marker.stroke_width,
        )
    state.last_frame = frame
    return frame


def bar_rect(bar: BarElement) -> Rect:
    """Pixel rect ``(x, y, width, height)`` covered by a bar, stroke included."""
    pad = int(np.ceil(bar.stroke_width / 2.0)) if bar.stroke else 0
    x0 = int(round(bar.x)) - pad
    y0 = int(round(bar.y)) - pad
    x1 = int(round(bar.x + bar.width)) + pad
    y1 = int(round(bar.y + bar.height)) + pad
    return (x0, y0, max(0, x1 - x0), max(0, y1 - y0))


def bar_patch(state: RenderState, key: int, frame: np.ndarray) -> tuple[Rect, np.ndarray] | None:
    """Dirty rect and pixels for one bar, clipped to ``frame``."""
    bar = state.bars.get(key)
    if bar is None:
        return None
    x, y, w, h = bar_rect(bar)
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(frame.shape[1], x + w)
    y1 = min(frame.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return None
    return (x0, y0, x1 - x0, y1 - y0), frame[y0:y1, x0:x1].copy()


def draw_bar(frame: np.ndarray, bar: BarElement) -> None:
    x0 = int(round(bar.x))
    y0 = int(round(bar.y))
    x1 = int(round(bar.x + bar.width))
    y1 = int(round(bar.y + bar.height))
    fill_rect(frame, x0, y0, x1, y1, hex_to_rgba(bar.fill, bar.fill_opacity))
    if bar.stroke and bar.stroke_width > 0:
        stroke_rect(frame, x0, y0, x1, y1, hex_to_rgba(bar.stroke, bar.stroke_opacity), width=int(round(bar.stroke_width)))


def _base_layer(state: RenderState, width: int, height: int, background: str) -> np.ndarray:
    cache = state.layer_cache
    background_key = (width, height, background)
    if cache.background_key != background_key or cache.background_template is None:
        cache.background_template = new_canvas(width, height, hex_to_rgba(background))
        cache.background_key = background_key
        cache.axis_key = None

    axes = tuple(axis for axis in state.axes.values() if axis.visible)
    axis_key = (background_key, axes)
    if cache.axis_key != axis_key or cache.axis_template is None:
        template = cache.background_template.copy()
        for axis in axes:
            _draw_axis(template, axis)
        cache.axis_template = template
        cache.axis_key = axis_key
    return cache.axis_template.copy()


def _draw_axis(frame: np.ndarray, axis: AxisElement) -> None:
    color = hex_to_rgba(axis.color)
    tx, ty = (int(round(v)) for v in axis.translate)
    font_size = axis.font_size
    if not axis.ticks:
        return
    if axis.orientation == "bottom":
        positions = [int(round(t.position)) for t in axis.ticks]
        draw_hline(frame, min(positions), max(positions), ty, color)
        for tick, px in zip(axis.ticks, positions, strict=True):
            draw_vline(frame, tx + px, ty, ty + TICK_SIZE, color)
            tw, _ = text_size(tick.label, font_size_px=font_size)
            draw_text(frame, tx + px - tw // 2, ty + TICK_SIZE + TICK_PADDING, tick.label, color, font_size_px=font_size)
        return

    direction = 1 if axis.orientation == "right" else -1
    positions = [int(round(t.position)) for t in axis.ticks]
    draw_vline(frame, tx, min(positions), max(positions), color)
    for tick, py in zip(axis.ticks, positions, strict=True):
        draw_hline(frame, tx, tx + direction * TICK_SIZE, ty + py, color)
        tw, th = text_size(tick.label, font_size_px=font_size)
        offset = TICK_SIZE + TICK_PADDING
        x = tx + offset if direction > 0 else tx - offset - tw
        draw_text(frame, x, ty + py - th // 2, tick.label, color, font_size_px=font_size)


def _draw_average_line(frame: np.ndarray, line: AverageLineElement) -> None:
    color = hex_to_rgba(line.color)
    y = int(round(line.y))
    draw_dashed_hline(
        frame,
        int(round(line.x0)),
        int(round(line.x1)),
        y,
        color,
        width=max(1, int(round(line.width))),
        dash=line.dash,
    )
    if line.show_label and line.label:
        _, th = text_size(line.label, font_size_px=line.font_size)
        # Offset is relative to the text baseline.
        top = int(round(y + line.label_offset)) - th
        draw_text(frame, int(round(line.x0)), top, line.label, color, font_size_px=line.font_size)
