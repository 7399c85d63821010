from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Literal

from pareto_plot.selection import SelectionId


StyleKind = Literal["shape", "text"]
ActionKind = Literal["reset", "toggle", "picker", "navigate"]


class PartToken(str, Enum):
    """Sub-selectable chart parts a format pane can target."""

    COLOR_SELECTOR = "colorSelector"
    ENABLE_AXIS = "enableAxis"
    DIRECT_EDIT = "directEdit"


@dataclass(frozen=True)
class PropertyRef:
    object_name: str
    property_name: str
    selector: SelectionId | None = None


@dataclass(frozen=True)
class StyleEntry:
    name: str
    label: str
    reference: PropertyRef


@dataclass(frozen=True)
class SubSelectionStyles:
    kind: StyleKind
    entries: tuple[StyleEntry, ...]

    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.entries)


@dataclass(frozen=True)
class QuickAction:
    kind: ActionKind
    related: tuple[PropertyRef, ...] = ()
    excluded: tuple[PropertyRef, ...] = ()
    reference: PropertyRef | None = None
    label: str | None = None
    enabled_label: str | None = None
    disabled_label: str | None = None
    card_uid: str | None = None


@dataclass(frozen=True)
class PartCapabilities:
    styles: SubSelectionStyles | None
    quick_actions: tuple[QuickAction, ...]

    @classmethod
    def empty(cls) -> "PartCapabilities":
        return cls(styles=None, quick_actions=())

    def is_empty(self) -> bool:
        return self.styles is None and not self.quick_actions


def _ref(token: PartToken, property_name: str) -> PropertyRef:
    return PropertyRef(object_name=token.value, property_name=property_name)


def _card(token: PartToken) -> str:
    return f"Visual-{token.value}-card"


def _color_selector(selector: SelectionId | None) -> PartCapabilities:
    fill = replace(_ref(PartToken.COLOR_SELECTOR, "fill"), selector=selector)
    return PartCapabilities(
        styles=SubSelectionStyles(kind="shape", entries=(StyleEntry("fill", "Fill", fill),)),
        quick_actions=(
            QuickAction(kind="reset", related=(fill,)),
            QuickAction(kind="navigate", card_uid=_card(PartToken.COLOR_SELECTOR), label="Color"),
        ),
    )


def _enable_axis(selector: SelectionId | None) -> PartCapabilities:
    fill = _ref(PartToken.ENABLE_AXIS, "fill")
    show = _ref(PartToken.ENABLE_AXIS, "show")
    return PartCapabilities(
        styles=SubSelectionStyles(kind="shape", entries=(StyleEntry("fill", "Enable Axis", fill),)),
        quick_actions=(
            QuickAction(kind="reset", related=(fill,), excluded=(show,)),
            QuickAction(kind="toggle", related=(show,), reference=show, enabled_label="Delete", disabled_label="Delete"),
            QuickAction(kind="navigate", card_uid=_card(PartToken.ENABLE_AXIS), label="EnableAxis"),
        ),
    )


_DIRECT_EDIT_STYLES = (
    ("fontFamily", "font"),
    ("bold", "font"),
    ("italic", "font"),
    ("underline", "font"),
    ("fontSize", "font"),
    ("fontColor", "fontColor"),
    ("background", "background"),
)
_DIRECT_EDIT_RESET = ("bold", "fontFamily", "fontSize", "italic", "underline", "fontColor", "textProperty")


def _direct_edit(selector: SelectionId | None) -> PartCapabilities:
    token = PartToken.DIRECT_EDIT
    show = _ref(token, "show")
    return PartCapabilities(
        styles=SubSelectionStyles(
            kind="text",
            entries=tuple(StyleEntry(name, label, _ref(token, name)) for name, label in _DIRECT_EDIT_STYLES),
        ),
        quick_actions=(
            QuickAction(kind="reset", related=tuple(_ref(token, name) for name in _DIRECT_EDIT_RESET)),
            QuickAction(kind="toggle", related=(show,), reference=show, disabled_label="Delete"),
            QuickAction(kind="picker", reference=_ref(token, "position"), label="Position"),
            QuickAction(kind="navigate", card_uid=_card(token), label="Direct edit"),
        ),
    )


_RESOLVERS: dict[PartToken, Callable[[SelectionId | None], PartCapabilities]] = {
    PartToken.COLOR_SELECTOR: _color_selector,
    PartToken.ENABLE_AXIS: _enable_axis,
    PartToken.DIRECT_EDIT: _direct_edit,
}


def resolve_part(token: PartToken | str | None, selector: SelectionId | None = None) -> PartCapabilities:
    """Format-pane styles and quick actions for one sub-selected part.

    ``selector`` scopes per-category references (only the colour selector
    uses it). Unknown tokens resolve to empty capabilities.
    """

    try:
        part = PartToken(token)
    except ValueError:
        return PartCapabilities.empty()
    return _RESOLVERS[part](selector)
