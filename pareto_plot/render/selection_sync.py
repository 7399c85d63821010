from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pareto_plot.render.elements import BarElement
from pareto_plot.selection import SelectionId, is_member


LOGGER = logging.getLogger(__name__)


def sync_selection_state(
    bars: Iterable[BarElement],
    selected_ids: Sequence[SelectionId] | None,
    *,
    solid_opacity: float,
    dimmed_opacity: float,
) -> list[int]:
    """Set every bar's opacity from the current selection.

    Returns the keys of bars whose opacity actually changed. Safe to call from
    both the render path and a late selection confirmation: it only reads the
    bars and ids it is given.
    """

    bars = list(bars)
    if selected_ids is None or not bars:
        return []

    changed: list[int] = []
    has_selection = len(selected_ids) > 0
    for bar in bars:
        if not has_selection or is_member(selected_ids, bar.selection_key):
            opacity = solid_opacity
        else:
            opacity = dimmed_opacity
        if bar.set_opacity(opacity):
            changed.append(bar.key)
    if changed:
        LOGGER.debug("selection sync changed %d of %d bars", len(changed), len(bars))
    return changed
