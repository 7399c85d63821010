from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass
class LayerCache:
    """Pre-rendered layers reused while their inputs are unchanged."""

    background_key: tuple[Any, ...] | None = None
    background_template: np.ndarray | None = None
    axis_key: tuple[Any, ...] | None = None
    axis_template: np.ndarray | None = None
