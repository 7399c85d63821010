from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable, Sequence

from pareto_plot.adapters.query import CategoryColumn


LOGGER = logging.getLogger(__name__)

SelectionCallback = Callable[[list["SelectionId"]], None]


@dataclass(frozen=True)
class SelectionId:
    """Opaque selectable identity issued per category cell.

    An identity with ``index=None`` stands for the whole column and includes
    every finer-grained identity issued for that column.
    """

    column: str
    index: int | None = None
    label: str | None = None

    def includes(self, other: "SelectionId") -> bool:
        if self.column != other.column:
            return False
        return self.index is None or self.index == other.index


def is_member(selected: Iterable[SelectionId] | None, identity: SelectionId | None) -> bool:
    if not selected or identity is None:
        return False
    return any(current.includes(identity) for current in selected)


class SelectionService:
    def create_identity(self, column: CategoryColumn, index: int) -> SelectionId:
        label = str(column.values[index]) if 0 <= index < len(column.values) else None
        return SelectionId(column=column.source.query_name, index=int(index), label=label)

    def column_identity(self, column: CategoryColumn) -> SelectionId:
        return SelectionId(column=column.source.query_name)


class SelectionResult:
    """Single-shot result channel for an asynchronous selection confirmation."""

    def __init__(self) -> None:
        self._done = False
        self._value: list[SelectionId] = []
        self._callbacks: list[SelectionCallback] = []

    @property
    def done(self) -> bool:
        return self._done

    def result(self) -> list[SelectionId]:
        if not self._done:
            raise RuntimeError("selection result is not resolved yet")
        return list(self._value)

    def then(self, callback: SelectionCallback) -> "SelectionResult":
        if self._done:
            callback(list(self._value))
        else:
            self._callbacks.append(callback)
        return self

    def resolve(self, ids: Sequence[SelectionId]) -> None:
        if self._done:
            raise RuntimeError("selection result already resolved")
        self._done = True
        self._value = list(ids)
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(list(self._value))


@dataclass(frozen=True)
class ContextMenuRequest:
    identity: SelectionId | None
    x: float
    y: float


class SelectionManager:
    """Host-side owner of the selection set.

    With ``auto_confirm`` disabled, ``select``/``clear`` return pending results
    that resolve on :meth:`confirm_pending`, mimicking a host that confirms
    selections asynchronously.
    """

    def __init__(self, *, auto_confirm: bool = True) -> None:
        self.auto_confirm = auto_confirm
        self._selected: list[SelectionId] = []
        self._on_select: list[SelectionCallback] = []
        self._pending: list[tuple[SelectionResult, list[SelectionId]]] = []
        self.context_menus: list[ContextMenuRequest] = []

    def get_selection_ids(self) -> list[SelectionId]:
        return list(self._selected)

    def has_selection(self) -> bool:
        return bool(self._selected)

    def register_on_select_callback(self, callback: SelectionCallback) -> None:
        self._on_select.append(callback)

    def select(self, identity: SelectionId, multi_select: bool = False) -> SelectionResult:
        current = list(self._selected)
        if multi_select:
            if identity in current:
                current.remove(identity)
            else:
                current.append(identity)
        elif current == [identity]:
            current = []
        else:
            current = [identity]
        self._selected = current
        return self._issue(current)

    def clear(self) -> SelectionResult:
        self._selected = []
        return self._issue([])

    def apply_external_selection(self, ids: Sequence[SelectionId]) -> None:
        """Selection changed by another visual or by the host itself."""
        self._selected = list(ids)
        for callback in list(self._on_select):
            callback(list(self._selected))

    def show_context_menu(self, identity: SelectionId | None, *, x: float, y: float) -> ContextMenuRequest:
        request = ContextMenuRequest(identity=identity, x=float(x), y=float(y))
        self.context_menus.append(request)
        return request

    def pending_count(self) -> int:
        return len(self._pending)

    def confirm_pending(self) -> int:
        pending, self._pending = self._pending, []
        for result, ids in pending:
            result.resolve(ids)
        return len(pending)

    def _issue(self, ids: list[SelectionId]) -> SelectionResult:
        result = SelectionResult()
        if self.auto_confirm:
            result.resolve(ids)
        else:
            self._pending.append((result, list(ids)))
            LOGGER.debug("selection result pending; queued=%d", len(self._pending))
        return result
