"""Visual object tree rendered by the heap list view."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Unnamed:
    """Plain text leaf; never clickable."""

    text: str


@dataclass(frozen=True)
class Named:
    """Titled container box; children are laid out left-to-right above the title."""

    label: str
    children: Tuple["VisObject", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class Link:
    """Reference pill pointing at another object."""

    target: str


@dataclass(frozen=True)
class Function:
    """Function pill; drawn like a link with its own colors."""

    target: str


VisObject = Union[Unnamed, Named, Link, Function]


class BoundingBox(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    def translated(self, dx: float, dy: float) -> "BoundingBox":
        return BoundingBox(self.x + dx, self.y + dy, self.width, self.height)


HitEntry = Tuple[str, BoundingBox]


@dataclass(frozen=True)
class TopLevelEntry:
    """One named root structure: its label column text and its object row."""

    name: str
    objects: Tuple[VisObject, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.objects, tuple):
            object.__setattr__(self, "objects", tuple(self.objects))


def object_key(obj: VisObject) -> Optional[str]:
    """Return the string an object is picked by, or None for plain text."""
    if isinstance(obj, Named):
        return obj.label
    if isinstance(obj, (Link, Function)):
        return obj.target
    return None


def iter_objects(objects: Iterable[VisObject]) -> Iterator[VisObject]:
    """Depth-first walk over a forest, parents before children."""
    for obj in objects:
        yield obj
        if isinstance(obj, Named):
            yield from iter_objects(obj.children)


def collect_keys(entries: Sequence[TopLevelEntry]) -> List[str]:
    keys: List[str] = []
    for entry in entries:
        for obj in iter_objects(entry.objects):
            key = object_key(obj)
            if key is not None:
                keys.append(key)
    return keys
