from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

from pareto_plot.adapters.query import coerce_number
from pareto_plot.data_points import DataPoint
from pareto_plot.scales import format_tick


BLANK_TEXT = "(Blank)"

_FORMAT_SECTION = re.compile(
    r"^(?P<prefix>[^#0.,%]*)(?P<integer>[#0,]*)(?:\.(?P<fraction>[#0]+))?(?P<percent>%?)(?P<suffix>.*)$"
)


@dataclass(frozen=True)
class TooltipItem:
    label: str
    formatted_value: str
    color: str
    header: str


def build_tooltip(point: DataPoint) -> TooltipItem:
    return TooltipItem(
        label=point.category,
        formatted_value=format_value(point.value, point.value_format),
        color=point.color,
        header=f"Cumulative %: {point.cumulative_percent:.2f}",
    )


def format_value(value: Any, value_format: str | None = None) -> str:
    """Render a cell value with an Excel-style numeric format string.

    Supports literal prefixes/suffixes, ``,`` grouping, ``0``/``#`` fraction
    digits and ``%`` scaling; only the first ``;`` section is honoured.
    """

    if value is None:
        return BLANK_TEXT
    number = coerce_number(value)
    if number is None:
        return str(value)
    if not value_format or value_format.strip().lower() == "general":
        return format_tick(number)

    section = value_format.split(";", 1)[0]
    match = _FORMAT_SECTION.match(section)
    if match is None or not (match.group("integer") or match.group("fraction")):
        return format_tick(number)

    fraction = match.group("fraction") or ""
    min_decimals = fraction.count("0")
    max_decimals = len(fraction)
    if match.group("percent"):
        number *= 100.0
    grouping = "," if "," in match.group("integer") else ""
    text = f"{number:{grouping}.{max_decimals}f}"
    if max_decimals > min_decimals and "." in text:
        whole, frac = text.split(".", 1)
        frac = frac.rstrip("0").ljust(min_decimals, "0")
        text = f"{whole}.{frac}" if frac else whole
    return f"{_literal(match.group('prefix'))}{text}{match.group('percent')}{_literal(match.group('suffix'))}"


def _literal(raw: str) -> str:
    return raw.replace("\\", "").replace('"', "")
