from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Generic, Iterator, Sequence, TypeVar


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ReconcilePlan:
    create: tuple[int, ...] = ()
    update: tuple[int, ...] = ()
    delete: tuple[int, ...] = ()

    def is_noop(self) -> bool:
        return not self.create and not self.delete


class ElementArena(Generic[T]):
    """Render targets keyed by a stable data index.

    Element ids are never reused, so a recreated element is distinguishable
    from one that was updated in place.
    """

    def __init__(self) -> None:
        self._items: dict[int, T] = {}
        self._next_element_id = 1

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def keys(self) -> tuple[int, ...]:
        return tuple(self._items)

    def get(self, key: int) -> T | None:
        return self._items.get(key)

    def plan(self, keys: Sequence[int]) -> ReconcilePlan:
        wanted = list(dict.fromkeys(keys))
        wanted_set = set(wanted)
        return ReconcilePlan(
            create=tuple(k for k in wanted if k not in self._items),
            update=tuple(k for k in wanted if k in self._items),
            delete=tuple(k for k in self._items if k not in wanted_set),
        )

    def apply(self, plan: ReconcilePlan, factory: Callable[[int, int], T]) -> None:
        for key in plan.delete:
            del self._items[key]
        for key in plan.create:
            self._items[key] = factory(key, self._next_element_id)
            self._next_element_id += 1
        order = plan.update + plan.create
        self._items = {key: self._items[key] for key in sorted(order)}
        LOGGER.debug(
            "arena reconciled: create=%d update=%d delete=%d",
            len(plan.create),
            len(plan.update),
            len(plan.delete),
        )
