from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from pareto_plot.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

# Chart labels use the host's UI face; the rest are common sans fallbacks.
FONT_STEMS = ("segoeui", "helvetica", "arial", "dejavusans", "liberationsans", "freesans")
FONT_DIRS = (
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("C:/Windows/Fonts"),
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(dst: np.ndarray, x: int, y: int, text: str, color: RGBA, *, font_size_px: float = 12.0) -> None:
    """Blend ``text`` into ``dst`` with its ink box's top-left corner at ``(x, y)``."""
    if not text or font_size_px <= 0:
        return
    coverage = _coverage(text, _font(_px(font_size_px)))
    h, w = coverage.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    alpha = coverage[y0 - y : y1 - y, x0 - x : x1 - x, None].astype(np.float32) * (color[3] / 255.0 / 255.0)
    view = dst[y0:y1, x0:x1]
    ink = np.asarray(color[:3], dtype=np.float32)
    view[:, :, :3] = np.clip(ink * alpha + view[:, :, :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    view[:, :, 3] = 255


def text_size(text: str, *, font_size_px: float = 12.0) -> tuple[int, int]:
    font = _font(_px(font_size_px))
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, ascent + descent))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


def _px(font_size_px: float) -> int:
    return max(1, int(round(font_size_px)))


@lru_cache(maxsize=256)
def _coverage(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _font(size: int) -> Font:
    path = _system_font()
    if path is not None:
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError:
            LOGGER.warning("could not load font %s; using Pillow default", path)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=1)
def _system_font() -> Path | None:
    found: dict[str, Path] = {}
    for base in FONT_DIRS:
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*.tt[fc]")):
            found.setdefault(path.stem.lower().replace(" ", "").replace("-", ""), path)
    for stem in FONT_STEMS:
        if stem in found:
            return found[stem]
    return None
