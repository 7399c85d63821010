from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import cached_property
import math
from typing import Hashable, Sequence

import numpy as np

from pareto_plot.config import DEFAULT_CONFIG, ChartConfig
from pareto_plot.errors import ParetoDataError


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ParetoDataError(f"viewport {name} must be a finite number >= 0")

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)


@dataclass(frozen=True)
class BandScale:
    """Discrete keys to evenly spaced, rounded bands across ``[start, stop]``.

    ``padding`` is applied as both the inner and the outer padding, and the
    band block is centred in the range.
    """

    keys: tuple[Hashable, ...]
    range_start: float
    range_stop: float
    padding: float = 0.2

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding < 1.0:
            raise ValueError("padding must be in [0, 1)")
        if len(set(self.keys)) != len(self.keys):
            raise ParetoDataError("band scale keys must be unique")

    @property
    def step(self) -> float:
        return self._layout[1]

    @property
    def bandwidth(self) -> float:
        return self._layout[2]

    def position(self, key: Hashable) -> float:
        start, step, _ = self._layout
        slot = self._slots[key]
        return start + step * slot

    def right_edge(self, key: Hashable) -> float:
        return self.position(key) + self.bandwidth

    @cached_property
    def _slots(self) -> dict[Hashable, int]:
        return {key: slot for slot, key in enumerate(self.keys)}

    @cached_property
    def _layout(self) -> tuple[float, float, float]:
        n = len(self.keys)
        if n == 0:
            return (float(self.range_start), 0.0, 0.0)
        start = float(self.range_start)
        stop = float(self.range_stop)
        step = (stop - start) / max(1.0, n - self.padding + self.padding * 2.0)
        step = math.floor(step)
        start += (stop - start - step * (n - self.padding)) * 0.5
        bandwidth = step * (1.0 - self.padding)
        return (float(_round_half_up(start)), float(step), float(_round_half_up(bandwidth)))


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # Degenerate domain (e.g. zero total) collapses onto the range start.
            return float(r0)
        return float(r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0))

    def map(self, values: Sequence[float] | np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return np.full(arr.shape, float(r0), dtype=np.float64)
        return r0 + (arr - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 10) -> np.ndarray:
        vmin = float(min(self.domain))
        vmax = float(max(self.domain))
        ticks = generate_nice_ticks(vmin, vmax, count)
        return _ticks_within_range(ticks, vmin=vmin, vmax=vmax)

    def tick_labels(self, count: int = 10) -> list[str]:
        return format_ticks_for_axis(self.ticks(count))


@dataclass(frozen=True)
class ChartScales:
    category: BandScale
    value: LinearScale
    percent: LinearScale
    viewport: Viewport
    baseline: float


def build_scales(
    keys: Sequence[Hashable],
    total: float,
    viewport: Viewport,
    *,
    config: ChartConfig = DEFAULT_CONFIG,
) -> ChartScales:
    """Fresh category/value/percent scales for one update."""

    margins = config.margins
    baseline = float(viewport.height - margins.bottom)
    # A total that overflowed to inf collapses the value axis onto the baseline.
    value_max = float(total) if math.isfinite(total) else 0.0
    top = float(margins.top)
    return ChartScales(
        category=BandScale(
            keys=tuple(keys),
            range_start=0.0,
            range_stop=float(viewport.width),
            padding=config.band_padding,
        ),
        value=LinearScale(domain=(0.0, value_max), range=(baseline, top)),
        percent=LinearScale(domain=(0.0, 100.0), range=(baseline, top)),
        viewport=viewport,
        baseline=baseline,
    )


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax or not math.isfinite(vmax - vmin):
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e9 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else max(1e-12, abs(vmax - vmin))
    eps = max(1e-12, step * 1e-6)
    mask = (ticks >= (vmin - eps)) & (ticks <= (vmax + eps))
    return ticks[mask]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
