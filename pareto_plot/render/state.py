from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from pareto_plot.data_points import DataPoint
from pareto_plot.raster import LayerCache
from pareto_plot.render.arena import ElementArena
from pareto_plot.render.elements import AverageLineElement, AxisElement, BarElement, LineElement, MarkerElement
from pareto_plot.scales import ChartScales, Viewport
from pareto_plot.series import ParetoLine


@dataclass
class RenderState:
    """Everything a render leaves behind, owned by one chart controller."""

    bars: ElementArena[BarElement] = field(default_factory=ElementArena)
    line: LineElement = field(default_factory=LineElement)
    markers: list[MarkerElement] = field(default_factory=list)
    axes: dict[str, AxisElement] = field(default_factory=dict)
    average_line: AverageLineElement | None = None
    points: tuple[DataPoint, ...] = ()
    scales: ChartScales | None = None
    pareto_line: ParetoLine = field(default_factory=ParetoLine)
    format_mode: bool = False
    revision: int = 0
    layer_cache: LayerCache = field(default_factory=LayerCache)
    last_frame: np.ndarray | None = None

    @property
    def viewport(self) -> Viewport | None:
        return None if self.scales is None else self.scales.viewport

    def point_for(self, key: int) -> DataPoint | None:
        bar = self.bars.get(key)
        return None if bar is None else bar.datum
