"""Frame-local (label, box) index used to resolve the pointer to an object."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from heap_view.vis_objects import HitEntry


class HitIndex:
    """Flat list of picking boxes in paint order.

    Labels are not unique: two objects with the same label both get an entry,
    and ``lookup`` returns the label of the first box containing the point.
    """

    def __init__(self, entries: Iterable[HitEntry] = ()) -> None:
        self._entries: Tuple[HitEntry, ...] = tuple(entries)

    @property
    def entries(self) -> Tuple[HitEntry, ...]:
        return self._entries

    def replace(self, entries: Iterable[HitEntry]) -> None:
        self._entries = tuple(entries)

    def lookup(self, x: float, y: float) -> Optional[str]:
        for label, box in self._entries:
            if box.contains(x, y):
                return label
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HitEntry]:
        return iter(self._entries)
