from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pareto_plot.data_points import DataPoint
from pareto_plot.selection import SelectionId


AxisOrientation = Literal["bottom", "right", "left"]


@dataclass
class BarElement:
    """Persistent bar handle, updated in place across renders."""

    key: int
    element_id: int
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    fill: str = "#000000"
    stroke: str | None = None
    stroke_width: float = 0.0
    fill_opacity: float = 1.0
    stroke_opacity: float = 1.0
    selection_key: SelectionId | None = None
    display_name: str = ""
    object_name: str = "colorSelector"
    sub_selectable: bool = False
    hovered: bool = False
    datum: DataPoint | None = None

    def set_opacity(self, opacity: float) -> bool:
        changed = self.fill_opacity != opacity or self.stroke_opacity != opacity
        self.fill_opacity = opacity
        self.stroke_opacity = opacity
        return changed

    def attributes(self) -> tuple[Any, ...]:
        return (
            self.key,
            self.x,
            self.y,
            self.width,
            self.height,
            self.fill,
            self.stroke,
            self.stroke_width,
            self.fill_opacity,
            self.stroke_opacity,
            self.selection_key,
            self.display_name,
            self.sub_selectable,
        )


@dataclass(frozen=True)
class MarkerElement:
    cx: float
    cy: float
    radius: float
    fill: str
    stroke: str
    stroke_width: float


@dataclass
class LineElement:
    vertices: tuple[tuple[float, float], ...] = ()
    stroke: str = "#000000"
    stroke_width: float = 1.0


@dataclass(frozen=True)
class TickMark:
    position: float
    label: str


@dataclass(frozen=True)
class AxisElement:
    name: str
    orientation: AxisOrientation
    translate: tuple[float, float]
    ticks: tuple[TickMark, ...]
    color: str
    font_size: float
    visible: bool = True


@dataclass(frozen=True)
class AverageLineElement:
    y: float
    x0: float
    x1: float
    color: str
    width: float
    dash: tuple[int, int]
    label: str
    label_offset: float
    font_size: float
    show_label: bool
