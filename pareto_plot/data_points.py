from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from pareto_plot.adapters.query import CategoryColumn, QueryResult, cell_object_value, coerce_number
from pareto_plot.config import DEFAULT_CONFIG, ChartConfig, is_hex_color
from pareto_plot.palette import ColorPalette
from pareto_plot.selection import SelectionId, SelectionService


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataPoint:
    category: str
    value: Any
    index: int
    color: str
    stroke_color: str | None
    stroke_width_px: float
    selection_key: SelectionId
    value_format: str | None = None
    cumulative_percent: float = 0.0

    @property
    def numeric_value(self) -> float:
        number = coerce_number(self.value)
        return 0.0 if number is None else number


def build_data_points(
    query: QueryResult | None,
    palette: ColorPalette,
    selection_service: SelectionService,
    *,
    config: ChartConfig = DEFAULT_CONFIG,
) -> tuple[DataPoint, ...]:
    """Turn a bound query result into ordered data points.

    Absent or incomplete results produce an empty tuple, which callers treat
    as nothing to render.
    """

    if query is None or query.categories is None or query.values is None:
        LOGGER.debug("query result missing category or value column; nothing to render")
        return ()
    category = query.categories
    if category.source is None:
        LOGGER.debug("category column has no source metadata; nothing to render")
        return ()
    value_column = query.values

    stroke_color = column_stroke_color(palette)
    stroke_width = column_stroke_width(palette.is_high_contrast, config=config)

    points: list[DataPoint] = []
    for i in range(max(len(category.values), len(value_column.values))):
        label = _category_label(category, i)
        raw_value = value_column.values[i] if i < len(value_column.values) else None
        value_format = cell_object_value(value_column.objects, i, "general", "formatString")
        points.append(
            DataPoint(
                category=label,
                value=raw_value,
                index=i,
                color=column_color(category, i, palette),
                stroke_color=stroke_color,
                stroke_width_px=stroke_width,
                selection_key=selection_service.create_identity(category, i),
                value_format=str(value_format) if value_format is not None else None,
            )
        )
    return tuple(points)


def column_color(category: CategoryColumn, index: int, palette: ColorPalette) -> str:
    if palette.is_high_contrast:
        return palette.background
    default = palette.get_color(_category_label(category, index))
    override = cell_object_value(category.objects, index, "colorSelector", "fill")
    if is_hex_color(override):
        return override
    return default


def column_stroke_color(palette: ColorPalette) -> str | None:
    return palette.foreground if palette.is_high_contrast else None


def column_stroke_width(is_high_contrast: bool, *, config: ChartConfig = DEFAULT_CONFIG) -> float:
    return config.high_contrast_stroke_width if is_high_contrast else 0.0


def _category_label(category: CategoryColumn, index: int) -> str:
    # Padded rows past the end of the category column still need a label.
    if index >= len(category.values):
        return "None"
    return f"{category.values[index]}"
