from __future__ import annotations

from dataclasses import dataclass, replace
from itertools import accumulate
import math
from typing import Sequence

from pareto_plot.data_points import DataPoint
from pareto_plot.scales import ChartScales


Vertex = tuple[float, float]


@dataclass(frozen=True)
class ParetoLine:
    """Cumulative-percentage polyline in pixel space.

    ``vertices[0]`` is the synthetic origin anchor; every later vertex belongs
    to the data point with the matching entry in ``keys``.
    """

    vertices: tuple[Vertex, ...] = ()
    keys: tuple[int, ...] = ()

    @property
    def markers(self) -> tuple[Vertex, ...]:
        return self.vertices[1:]

    def is_empty(self) -> bool:
        return not self.vertices


def compute_total(points: Sequence[DataPoint]) -> float:
    total = 0.0
    for point in points:
        total += point.numeric_value
    return total


def accumulate_cumulative_percent(points: Sequence[DataPoint], total: float) -> tuple[DataPoint, ...]:
    """Running share of ``total`` in index order, as 0-100 percentages.

    Categories are accumulated in input order, not sorted by value. With
    non-negative values the result is non-decreasing; negative values are
    accepted but void that guarantee.
    """

    if not points:
        return ()
    if total == 0 or not math.isfinite(total):
        return tuple(replace(p, cumulative_percent=0.0) for p in points)
    running = accumulate(p.numeric_value for p in points)
    return tuple(replace(p, cumulative_percent=s / total * 100.0) for p, s in zip(points, running, strict=True))


def build_pareto_line(points: Sequence[DataPoint], scales: ChartScales) -> ParetoLine:
    if not points:
        return ParetoLine()
    category = scales.category
    start: Vertex = (category.position(points[0].index), scales.percent(0.0))
    vertices = [start]
    for point in points:
        vertices.append((category.right_edge(point.index), scales.percent(point.cumulative_percent)))
    return ParetoLine(vertices=tuple(vertices), keys=tuple(p.index for p in points))


def compute_average(points: Sequence[DataPoint]) -> float:
    if not points:
        return 0.0
    return compute_total(points) / len(points)
