from __future__ import annotations

import logging
from typing import Sequence

from pareto_plot.config import DEFAULT_CONFIG, DEFAULT_SETTINGS, ChartConfig, FormatSettings
from pareto_plot.data_points import DataPoint
from pareto_plot.palette import ColorPalette
from pareto_plot.render.arena import ReconcilePlan
from pareto_plot.render.elements import AverageLineElement, AxisElement, BarElement, MarkerElement, TickMark
from pareto_plot.render.state import RenderState
from pareto_plot.scales import ChartScales
from pareto_plot.series import ParetoLine, compute_average


LOGGER = logging.getLogger(__name__)


def render_sync(
    state: RenderState,
    points: Sequence[DataPoint],
    scales: ChartScales,
    line: ParetoLine,
    *,
    config: ChartConfig = DEFAULT_CONFIG,
    settings: FormatSettings = DEFAULT_SETTINGS,
    palette: ColorPalette,
    format_mode: bool = False,
) -> ReconcilePlan:
    """Apply one update's geometry to the persistent elements in ``state``.

    Bars are reconciled by data index and updated in place; markers and axes
    are regenerated. Calling this twice with the same inputs leaves the state
    unchanged after the first call.
    """

    plan = state.bars.plan([p.index for p in points])
    state.bars.apply(plan, lambda key, element_id: BarElement(key=key, element_id=element_id))
    base_opacity = config.solid_opacity * settings.base_opacity
    for point in points:
        bar = state.bars.get(point.index)
        assert bar is not None
        _update_bar(bar, point, scales, opacity=base_opacity, format_mode=format_mode)

    state.line.vertices = line.vertices
    state.line.stroke = config.line_stroke
    state.markers = build_markers(line, scales, config=config)
    state.axes = build_axes(points, scales, config=config, settings=settings, palette=palette)
    state.average_line = build_average_line(points, scales, config=config, settings=settings, palette=palette)
    state.points = tuple(points)
    state.scales = scales
    state.pareto_line = line
    state.format_mode = format_mode
    state.revision += 1
    return plan


def _update_bar(
    bar: BarElement,
    point: DataPoint,
    scales: ChartScales,
    *,
    opacity: float,
    format_mode: bool,
) -> None:
    top = scales.value(point.numeric_value)
    baseline = scales.baseline
    bar.x = scales.category.position(point.index)
    bar.width = scales.category.bandwidth
    bar.y = min(top, baseline)
    bar.height = abs(baseline - top)
    bar.fill = point.color
    bar.stroke = point.stroke_color
    bar.stroke_width = point.stroke_width_px
    bar.fill_opacity = opacity
    bar.stroke_opacity = opacity
    bar.selection_key = point.selection_key
    bar.display_name = point.category
    bar.sub_selectable = format_mode
    bar.datum = point


def build_markers(line: ParetoLine, scales: ChartScales, *, config: ChartConfig = DEFAULT_CONFIG) -> list[MarkerElement]:
    radius = marker_radius(scales, config=config)
    return [
        MarkerElement(
            cx=x,
            cy=y,
            radius=radius,
            fill=config.marker_fill,
            stroke=config.marker_stroke,
            stroke_width=config.marker_stroke_width,
        )
        for x, y in line.markers
    ]


def marker_radius(scales: ChartScales, *, config: ChartConfig = DEFAULT_CONFIG) -> float:
    return min(scales.baseline, scales.viewport.width) / config.marker_radius_divisor


def axis_font_size(scales: ChartScales, *, config: ChartConfig = DEFAULT_CONFIG) -> float:
    return max(0.0, min(scales.baseline, scales.viewport.width)) * config.axis_font_ratio


def axis_text_color(palette: ColorPalette, settings: FormatSettings) -> str:
    if palette.is_high_contrast:
        return palette.foreground
    return settings.axis_fill


def build_axes(
    points: Sequence[DataPoint],
    scales: ChartScales,
    *,
    config: ChartConfig = DEFAULT_CONFIG,
    settings: FormatSettings = DEFAULT_SETTINGS,
    palette: ColorPalette,
) -> dict[str, AxisElement]:
    if not points:
        return {}
    color = axis_text_color(palette, settings)
    font_size = axis_font_size(scales, config=config)
    half_band = scales.category.bandwidth / 2.0
    x_ticks = tuple(TickMark(position=scales.category.position(p.index) + half_band, label=p.category) for p in points)
    value_ticks = scales.value.ticks(config.value_tick_count)
    percent_ticks = scales.percent.ticks(config.percent_tick_count)
    return {
        "x": AxisElement(
            name="x",
            orientation="bottom",
            translate=(0.0, scales.baseline),
            ticks=x_ticks,
            color=color,
            font_size=font_size,
            visible=settings.axis_show,
        ),
        "y_left": AxisElement(
            name="y_left",
            orientation="right",
            translate=(0.0, 0.0),
            ticks=_linear_ticks(value_ticks.tolist(), scales.value.tick_labels(config.value_tick_count), scales.value),
            color=color,
            font_size=font_size,
            visible=settings.axis_show,
        ),
        "y_right": AxisElement(
            name="y_right",
            orientation="left",
            translate=(scales.viewport.width - config.margins.right, 0.0),
            ticks=_linear_ticks(percent_ticks.tolist(), scales.percent.tick_labels(config.percent_tick_count), scales.percent),
            color=color,
            font_size=font_size,
            visible=settings.axis_show,
        ),
    }


def _linear_ticks(values: list[float], labels: list[str], scale) -> tuple[TickMark, ...]:
    return tuple(TickMark(position=scale(v), label=label) for v, label in zip(values, labels, strict=True))


def build_average_line(
    points: Sequence[DataPoint],
    scales: ChartScales,
    *,
    config: ChartConfig = DEFAULT_CONFIG,
    settings: FormatSettings = DEFAULT_SETTINGS,
    palette: ColorPalette,
) -> AverageLineElement | None:
    if not points or not settings.average_line_show:
        return None
    average = compute_average(points)
    y = float(round(scales.value(average)))
    font_size = axis_font_size(scales, config=config)
    # Label goes above the line unless there is no room for it.
    label_offset = font_size * (-0.5 if y > font_size * 1.5 else 1.5)
    color = palette.foreground if palette.is_high_contrast else settings.average_line_fill
    return AverageLineElement(
        y=y,
        x0=0.0,
        x1=float(scales.viewport.width),
        color=color,
        width=config.average_line_width,
        dash=config.average_line_dash,
        label=f"Average: {average:.2f}",
        label_offset=label_offset,
        font_size=font_size,
        show_label=settings.average_line_show_label,
    )


def clear_render_state(state: RenderState) -> ReconcilePlan:
    """Remove every element; used when an update carries no renderable data."""
    plan = state.bars.plan([])
    state.bars.apply(plan, lambda key, element_id: BarElement(key=key, element_id=element_id))
    state.line.vertices = ()
    state.markers = []
    state.axes = {}
    state.average_line = None
    state.points = ()
    state.scales = None
    state.pareto_line = ParetoLine()
    state.revision += 1
    if plan.delete:
        LOGGER.debug("cleared %d bars for empty update", len(plan.delete))
    return plan
