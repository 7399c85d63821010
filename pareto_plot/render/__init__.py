from .arena import ElementArena, ReconcilePlan
from .elements import AverageLineElement, AxisElement, BarElement, LineElement, MarkerElement, TickMark
from .rasterize import bar_patch, bar_rect, rasterize
from .selection_sync import sync_selection_state
from .state import RenderState
from .sync import axis_text_color, clear_render_state, render_sync

__all__ = [
    "AverageLineElement",
    "AxisElement",
    "BarElement",
    "ElementArena",
    "LineElement",
    "MarkerElement",
    "ReconcilePlan",
    "RenderState",
    "TickMark",
    "axis_text_color",
    "bar_patch",
    "bar_rect",
    "clear_render_state",
    "rasterize",
    "render_sync",
    "sync_selection_state",
]
