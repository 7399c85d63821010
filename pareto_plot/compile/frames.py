from __future__ import annotations

import numpy as np
import torch

from pareto_plot.errors import ParetoDataError
from pareto_plot.surface import FullRewrite, ReplaceRect, WriteBatch


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    _check_rgba(frame_rgba, "frame_rgba")
    tensor = torch.from_numpy(np.ascontiguousarray(frame_rgba))
    return WriteBatch([FullRewrite(tensor)])


def compile_replace_patches_batch(patches: list[tuple[int, int, np.ndarray]]) -> WriteBatch:
    """One ``ReplaceRect`` per non-empty ``(x, y, patch)``; empty patches are skipped."""
    ops: list[ReplaceRect] = []
    for x, y, patch_rgba in patches:
        _check_rgba(patch_rgba, "patch_rgba")
        if x < 0 or y < 0:
            raise ParetoDataError("rect x/y must be >= 0")
        height, width, _ = patch_rgba.shape
        if width <= 0 or height <= 0:
            continue
        patch = torch.from_numpy(np.ascontiguousarray(patch_rgba))
        ops.append(ReplaceRect(x=x, y=y, width=width, height=height, rect_h_w_4=patch))
    if not ops:
        raise ParetoDataError("patches must include at least one non-empty patch")
    return WriteBatch(ops)


def _check_rgba(array: np.ndarray, label: str) -> None:
    if array.dtype != np.uint8:
        raise ParetoDataError(f"{label} must be uint8")
    if array.ndim != 3 or array.shape[2] != 4:
        raise ParetoDataError(f"{label} must have shape (H, W, 4)")
