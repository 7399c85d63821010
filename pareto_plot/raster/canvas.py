from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    canvas = np.empty((max(0, height), max(0, width), 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def fill_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Alpha-blend ``color`` over the half-open rect ``[x0, x1) x [y0, y1)``."""
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1], max(x0, x1))
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0], max(y0, y1))
    if xa >= xb or ya >= yb or color[3] == 0:
        return
    _blend(dst[ya:yb, xa:xb], color)


def stroke_rect(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
    if width <= 0 or x1 <= x0 or y1 <= y0:
        return
    w = min(width, (x1 - x0 + 1) // 2, (y1 - y0 + 1) // 2)
    w = max(1, w)
    fill_rect(dst, x0, y0, x1, y0 + w, color)
    fill_rect(dst, x0, y1 - w, x1, y1, color)
    fill_rect(dst, x0, y0 + w, x0 + w, y1 - w, color)
    fill_rect(dst, x1 - w, y0 + w, x1, y1 - w, color)


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    _blend(dst[y : y + 1, x : x + 1], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    _blend(dst[y : y + 1, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    _blend(dst[ya : yb + 1, x : x + 1], color)


def _blend(view: np.ndarray, color: RGBA) -> None:
    a = color[3] / 255.0
    if a >= 1.0:
        view[:, :, :3] = np.asarray(color[:3], dtype=np.uint8)
        view[:, :, 3] = 255
        return
    inv = 1.0 - a
    src = np.asarray(color[:3], dtype=np.float32) * a
    view[:, :, :3] = np.clip(src + view[:, :, :3].astype(np.float32) * inv, 0, 255).astype(np.uint8)
    view[:, :, 3] = 255
