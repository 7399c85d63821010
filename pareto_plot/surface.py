from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TypeAlias

import torch

from pareto_plot.errors import ParetoDataError


LOGGER = logging.getLogger(__name__)
MAGENTA = torch.tensor([255, 0, 255, 255], dtype=torch.uint8)


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor


@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    width: int
    height: int
    rect_h_w_4: torch.Tensor


WriteOp: TypeAlias = FullRewrite | ReplaceRect


@dataclass(frozen=True)
class WriteBatch:
    operations: list[WriteOp]


class ChartSurface:
    """RGBA pixel matrix the chart presents into.

    A batch is validated as a whole before any pixel changes, so a bad
    operation leaves the surface at its previous revision.
    """

    def __init__(self, height: int, width: int, background: tuple[int, int, int, int] = (255, 255, 255, 255)) -> None:
        self.background = background
        self.revision = 0
        self._matrix = self._blank(height, width)

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self._matrix.shape[0]), int(self._matrix.shape[1]))

    def resize(self, height: int, width: int) -> None:
        if (height, width) == self.shape:
            return
        self._matrix = self._blank(height, width)
        self.revision += 1
        LOGGER.debug("surface resized to %dx%d", width, height)

    def read_snapshot(self) -> torch.Tensor:
        return self._matrix.clone()

    def submit_write_batch(self, batch: WriteBatch) -> int:
        if not batch.operations:
            raise ParetoDataError("write batch must include at least one operation")
        height, width = self.shape
        prepared: list[tuple[slice, slice, torch.Tensor]] = []
        sanitized = 0
        for op in batch.operations:
            if isinstance(op, FullRewrite):
                rows, cols, raw = slice(0, height), slice(0, width), op.tensor_h_w_4
                expected = (height, width, 4)
            elif isinstance(op, ReplaceRect):
                _check_rect(op, width, height)
                rows, cols, raw = slice(op.y, op.y + op.height), slice(op.x, op.x + op.width), op.rect_h_w_4
                expected = (op.height, op.width, 4)
            else:
                raise TypeError(f"unsupported write op: {type(op)!r}")
            pixels, bad = _to_rgba8(raw, expected)
            sanitized += bad
            prepared.append((rows, cols, pixels))

        if sanitized:
            LOGGER.warning("surface write replaced %d out-of-range pixels with magenta", sanitized)
        for rows, cols, pixels in prepared:
            self._matrix[rows, cols, :] = pixels
        self.revision += 1
        return self.revision

    def _blank(self, height: int, width: int) -> torch.Tensor:
        if height <= 0 or width <= 0:
            raise ParetoDataError("height and width must be > 0")
        fill = torch.tensor(self.background, dtype=torch.uint8)
        return fill.repeat(height, width, 1)


def _check_rect(op: ReplaceRect, surface_width: int, surface_height: int) -> None:
    if op.width <= 0 or op.height <= 0:
        raise ParetoDataError("rect width/height must be > 0")
    if op.x < 0 or op.y < 0:
        raise ParetoDataError("rect x/y must be >= 0")
    if op.x + op.width > surface_width or op.y + op.height > surface_height:
        raise ParetoDataError("rect exceeds surface bounds")


def _to_rgba8(value: torch.Tensor, expected: tuple[int, int, int]) -> tuple[torch.Tensor, int]:
    """Coerce a pixel tensor to uint8; pixels with any non-finite or out-of-range channel become magenta."""
    if not torch.is_tensor(value):
        raise ParetoDataError("rgba tensor must be a torch.Tensor")
    if tuple(value.shape) != expected:
        raise ParetoDataError(f"rgba tensor has invalid shape: {tuple(value.shape)} expected {expected}")
    if value.dtype == torch.uint8:
        return value, 0
    if value.dtype == torch.bool or value.is_complex():
        raise ParetoDataError(f"rgba tensor must be numeric, got {value.dtype}")
    raw = value.to(torch.float32)
    bad = (~torch.isfinite(raw) | (raw < 0) | (raw > 255)).any(dim=-1)
    out = raw.nan_to_num(0.0).clamp(0, 255).to(torch.uint8)
    out[bad] = MAGENTA
    return out, int(bad.sum().item())
