from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

import numpy as np

from pareto_plot.adapters.query import QueryResult
from pareto_plot.compile import compile_full_rewrite_batch, compile_replace_patches_batch
from pareto_plot.config import DEFAULT_CONFIG, DEFAULT_SETTINGS, ChartConfig, FormatSettings
from pareto_plot.data_points import build_data_points
from pareto_plot.palette import ColorPalette
from pareto_plot.render import (
    RenderState,
    bar_patch,
    clear_render_state,
    rasterize,
    render_sync,
    sync_selection_state,
)
from pareto_plot.scales import Viewport, build_scales
from pareto_plot.selection import ContextMenuRequest, SelectionId, SelectionManager, SelectionResult, SelectionService
from pareto_plot.series import accumulate_cumulative_percent, build_pareto_line, compute_total
from pareto_plot.style_capabilities import PartCapabilities, PartToken, QuickAction, SubSelectionStyles, resolve_part
from pareto_plot.surface import ChartSurface
from pareto_plot.tooltip import TooltipItem, build_tooltip


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateOptions:
    query: QueryResult | None
    viewport: Viewport
    settings: FormatSettings = DEFAULT_SETTINGS
    format_mode: bool = False
    allow_interactions: bool = True


@dataclass(frozen=True)
class ColorSlice:
    display_name: str
    color: str
    selector: SelectionId


class ParetoChart:
    """Pareto chart controller: bars in input order plus a cumulative % line.

    Every :meth:`update` rebuilds data points, scales and geometry, then
    reconciles them into the persistent :class:`RenderState`. Selection events
    only touch bar opacity.
    """

    def __init__(
        self,
        palette: ColorPalette | None = None,
        selection_service: SelectionService | None = None,
        selection_manager: SelectionManager | None = None,
        config: ChartConfig = DEFAULT_CONFIG,
        surface: ChartSurface | None = None,
    ) -> None:
        self.palette = palette if palette is not None else ColorPalette()
        self.selection_service = selection_service if selection_service is not None else SelectionService()
        self.selection_manager = selection_manager if selection_manager is not None else SelectionManager()
        self.config = config
        self.surface = surface
        self.state = RenderState()
        self.settings = DEFAULT_SETTINGS
        self.allow_interactions = True
        self.selection_manager.register_on_select_callback(self.on_selection_changed)

    @property
    def format_mode(self) -> bool:
        return self.state.format_mode

    def update(self, options: UpdateOptions) -> np.ndarray:
        self.settings = options.settings
        self.allow_interactions = options.allow_interactions
        points = build_data_points(options.query, self.palette, self.selection_service, config=self.config)
        if not points:
            clear_render_state(self.state)
            self.state.format_mode = options.format_mode
            return self._present(options.viewport)

        total = compute_total(points)
        points = accumulate_cumulative_percent(points, total)
        scales = build_scales([p.index for p in points], total, options.viewport, config=self.config)
        line = build_pareto_line(points, scales)
        render_sync(
            self.state,
            points,
            scales,
            line,
            config=self.config,
            settings=self.settings,
            palette=self.palette,
            format_mode=options.format_mode,
        )
        self._sync_selection(self.selection_manager.get_selection_ids())
        return self._present(options.viewport)

    def on_selection_changed(self, ids: Sequence[SelectionId] | None) -> list[int]:
        """Selection-only path; re-reads whatever bars exist right now."""
        changed = self._sync_selection(ids)
        if changed:
            self._present_bars(changed)
        return changed

    def click_bar(self, index: int, multi_select: bool = False) -> SelectionResult | None:
        if not self.allow_interactions or self.format_mode:
            return None
        bar = self.state.bars.get(index)
        if bar is None or bar.selection_key is None:
            return None
        result = self.selection_manager.select(bar.selection_key, multi_select)
        result.then(self._on_selection_confirmed)
        return result

    def click_background(self) -> SelectionResult | None:
        if not self.allow_interactions or self.format_mode:
            return None
        result = self.selection_manager.clear()
        result.then(self._on_selection_confirmed)
        return result

    def context_menu(self, x: float, y: float, index: int | None = None) -> ContextMenuRequest | None:
        if self.format_mode:
            return None
        bar = self.state.bars.get(index) if index is not None else None
        identity = bar.selection_key if bar is not None else None
        return self.selection_manager.show_context_menu(identity, x=x, y=y)

    def hover(self, index: int) -> TooltipItem | None:
        point = self.state.point_for(index)
        if point is None:
            return None
        self.state.bars.get(index).hovered = True
        return build_tooltip(point)

    def leave(self, index: int) -> None:
        bar = self.state.bars.get(index)
        if bar is not None:
            bar.hovered = False

    def sub_selection_styles(self, token: PartToken | str, selector: SelectionId | None = None) -> SubSelectionStyles | None:
        return self.capabilities(token, selector).styles

    def sub_selection_shortcuts(self, token: PartToken | str, selector: SelectionId | None = None) -> tuple[QuickAction, ...]:
        return self.capabilities(token, selector).quick_actions

    def capabilities(self, token: PartToken | str, selector: SelectionId | None = None) -> PartCapabilities:
        return resolve_part(token, selector)

    def color_slices(self) -> list[ColorSlice]:
        return [
            ColorSlice(display_name=p.category, color=p.color, selector=p.selection_key)
            for p in self.state.points
        ]

    def frame(self) -> np.ndarray | None:
        return self.state.last_frame

    def _opacities(self) -> tuple[float, float]:
        base = self.settings.base_opacity
        return (self.config.solid_opacity * base, self.config.dimmed_opacity * base)

    def _sync_selection(self, ids: Sequence[SelectionId] | None) -> list[int]:
        solid, dimmed = self._opacities()
        return sync_selection_state(self.state.bars, ids, solid_opacity=solid, dimmed_opacity=dimmed)

    def _on_selection_confirmed(self, ids: list[SelectionId]) -> None:
        if not len(self.state.bars):
            LOGGER.warning("selection confirmed after the chart was cleared; ids=%d", len(ids))
            return
        # A newer selection may have landed while this result was pending.
        changed = self._sync_selection(self.selection_manager.get_selection_ids())
        if changed:
            self._present_bars(changed)

    def _present(self, viewport: Viewport) -> np.ndarray:
        frame = rasterize(self.state, self.palette.background, viewport=viewport)
        if self.surface is not None and frame.shape[0] > 0 and frame.shape[1] > 0:
            self.surface.resize(frame.shape[0], frame.shape[1])
            self.surface.submit_write_batch(compile_full_rewrite_batch(frame))
        return frame

    def _present_bars(self, keys: Sequence[int]) -> None:
        viewport = self.state.viewport
        if viewport is None:
            return
        frame = rasterize(self.state, self.palette.background, viewport=viewport)
        if self.surface is None or self.surface.shape != frame.shape[:2]:
            return
        patches = []
        for key in keys:
            found = bar_patch(self.state, key, frame)
            if found is not None:
                (x, y, _, _), pixels = found
                patches.append((x, y, pixels))
        if patches:
            self.surface.submit_write_batch(compile_replace_patches_batch(patches))
