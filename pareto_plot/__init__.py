from pareto_plot.adapters import CategoryColumn, ColumnSource, QueryResult, ValueColumn, query_from_dataframe, query_from_sequences
from pareto_plot.chart import ColorSlice, ParetoChart, UpdateOptions
from pareto_plot.config import DEFAULT_CONFIG, DEFAULT_SETTINGS, ChartConfig, FormatSettings, Margins, validate_format_settings
from pareto_plot.data_points import DataPoint, build_data_points
from pareto_plot.errors import ParetoDataError
from pareto_plot.palette import ColorPalette, high_contrast_palette
from pareto_plot.scales import BandScale, ChartScales, LinearScale, Viewport, build_scales
from pareto_plot.selection import ContextMenuRequest, SelectionId, SelectionManager, SelectionResult, SelectionService, is_member
from pareto_plot.series import ParetoLine, accumulate_cumulative_percent, build_pareto_line, compute_average, compute_total
from pareto_plot.style_capabilities import PartCapabilities, PartToken, resolve_part
from pareto_plot.surface import ChartSurface
from pareto_plot.tooltip import TooltipItem, build_tooltip, format_value

__all__ = [
    "BandScale",
    "CategoryColumn",
    "ChartConfig",
    "ChartScales",
    "ChartSurface",
    "ColorPalette",
    "ColorSlice",
    "ColumnSource",
    "ContextMenuRequest",
    "DEFAULT_CONFIG",
    "DEFAULT_SETTINGS",
    "DataPoint",
    "FormatSettings",
    "LinearScale",
    "Margins",
    "ParetoChart",
    "ParetoDataError",
    "ParetoLine",
    "PartCapabilities",
    "PartToken",
    "QueryResult",
    "SelectionId",
    "SelectionManager",
    "SelectionResult",
    "SelectionService",
    "TooltipItem",
    "UpdateOptions",
    "ValueColumn",
    "Viewport",
    "accumulate_cumulative_percent",
    "build_data_points",
    "build_pareto_line",
    "build_scales",
    "build_tooltip",
    "compute_average",
    "compute_total",
    "format_value",
    "high_contrast_palette",
    "is_member",
    "query_from_dataframe",
    "query_from_sequences",
    "resolve_part",
    "validate_format_settings",
]
