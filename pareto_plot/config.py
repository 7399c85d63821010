from __future__ import annotations

from dataclasses import asdict, dataclass, field
import re
from typing import Any, Literal, Mapping

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

DirectEditPosition = Literal["Left", "Right"]


@dataclass(frozen=True)
class Margins:
    top: int = 20
    right: int = 2
    bottom: int = 5
    left: int = 30


@dataclass(frozen=True)
class ChartConfig:
    """Fixed layout and highlight constants shared by every render."""

    margins: Margins = field(default_factory=Margins)
    band_padding: float = 0.2
    solid_opacity: float = 1.0
    dimmed_opacity: float = 0.4
    axis_font_ratio: float = 0.04
    marker_radius_divisor: float = 50.0
    marker_stroke_width: float = 3.0
    marker_fill: str = "#FFFFFF"
    marker_stroke: str = "#000000"
    line_stroke: str = "#000000"
    high_contrast_stroke_width: float = 2.0
    value_tick_count: int = 10
    percent_tick_count: int = 10
    average_line_width: float = 3.0
    average_line_dash: tuple[int, int] = (6, 6)

    def __post_init__(self) -> None:
        if not 0.0 <= self.band_padding < 1.0:
            raise ValueError("band_padding must be in [0, 1)")
        for name in ("solid_opacity", "dimmed_opacity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1]")
        if self.marker_radius_divisor <= 0:
            raise ValueError("marker_radius_divisor must be > 0")
        if self.value_tick_count <= 0 or self.percent_tick_count <= 0:
            raise ValueError("tick counts must be > 0")


DEFAULT_CONFIG = ChartConfig()


@dataclass(frozen=True)
class FormatSettings:
    """Persisted formatting state supplied by the host on every update."""

    axis_show: bool = True
    axis_fill: str = "#000000"
    general_opacity: float = 100.0
    average_line_show: bool = False
    average_line_fill: str = "#888888"
    average_line_show_label: bool = True
    direct_edit_show: bool = True
    direct_edit_text: str = "Pareto"
    direct_edit_font_family: str = "Segoe UI"
    direct_edit_font_size: float = 12.0
    direct_edit_font_color: str = "#000000"
    direct_edit_bold: bool = False
    direct_edit_italic: bool = False
    direct_edit_underline: bool = False
    direct_edit_position: DirectEditPosition = "Right"
    direct_edit_background: str = "#FFFFFF"

    @property
    def base_opacity(self) -> float:
        return self.general_opacity / 100.0


DEFAULT_SETTINGS = FormatSettings()

_COLOR_KEYS = (
    "axis_fill",
    "average_line_fill",
    "direct_edit_font_color",
    "direct_edit_background",
)
_BOOL_KEYS = (
    "axis_show",
    "average_line_show",
    "average_line_show_label",
    "direct_edit_show",
    "direct_edit_bold",
    "direct_edit_italic",
    "direct_edit_underline",
)


def validate_format_settings(overrides: Mapping[str, Any] | None = None) -> FormatSettings:
    """Validate and merge host formatting overrides against defaults."""

    raw: dict[str, Any] = asdict(DEFAULT_SETTINGS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown format setting: {key}")
            raw[key] = value

    for key in _COLOR_KEYS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Setting `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    for key in _BOOL_KEYS:
        if not isinstance(raw[key], bool):
            raise ValueError(f"Setting `{key}` must be a boolean")

    opacity = raw["general_opacity"]
    if isinstance(opacity, bool) or not isinstance(opacity, (int, float)) or not 0 <= float(opacity) <= 100:
        raise ValueError("Setting `general_opacity` must be a number in [0, 100]")

    size = raw["direct_edit_font_size"]
    if isinstance(size, bool) or not isinstance(size, (int, float)) or float(size) <= 0:
        raise ValueError("Setting `direct_edit_font_size` must be a positive number")

    if raw["direct_edit_position"] not in {"Left", "Right"}:
        raise ValueError("Setting `direct_edit_position` must be 'Left' or 'Right'")

    if not isinstance(raw["direct_edit_font_family"], str) or not raw["direct_edit_font_family"].strip():
        raise ValueError("Setting `direct_edit_font_family` must be a non-empty string")

    raw["general_opacity"] = float(opacity)
    raw["direct_edit_font_size"] = float(size)
    raw["direct_edit_text"] = str(raw["direct_edit_text"])
    return FormatSettings(**raw)


def hex_to_rgba(color: str, alpha: float = 1.0) -> tuple[int, int, int, int]:
    if not _HEX_COLOR.match(color):
        raise ValueError(f"invalid hex color: {color!r}")
    r = int(color[1:3], 16)
    g = int(color[3:5], 16)
    b = int(color[5:7], 16)
    a = int(color[7:9], 16) if len(color) == 9 else 255
    out_a = int(round(max(0.0, min(1.0, alpha)) * a))
    return (r, g, b, out_a)


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and _HEX_COLOR.match(value) is not None
