"""Demo data source: Python values rendered as visual objects.

Containers become named boxes (``b0``, ``b1``, ...), a container met a second
time in the same pass becomes a link to its box, unevaluated thunks become
links (``t0``, ``t1``, ...) that the click action can force, and plain
callables become function pills.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from heap_view.vis_objects import Function, Link, Named, Unnamed, VisObject

_CLIENT_LOGGER = logging.getLogger("HeapView.Client")

_SCALAR_TYPES = (type(None), bool, int, float, complex, str, bytes)
_MAX_REPR = 40
MAX_PARSE_DEPTH = 64


class Thunk:
    """Deferred computation forced at most once."""

    def __init__(self, compute: Callable[[], Any]) -> None:
        self._compute: Optional[Callable[[], Any]] = compute
        self._value: Any = None
        self._forced = False

    @property
    def forced(self) -> bool:
        return self._forced

    @property
    def value(self) -> Any:
        if not self._forced:
            raise RuntimeError("Thunk has not been forced")
        return self._value

    def force(self) -> Any:
        if not self._forced:
            compute = self._compute
            if compute is None:
                raise RuntimeError("Thunk forced while it is already being forced")
            self._compute = None
            try:
                self._value = compute()
            except BaseException:
                self._compute = compute
                raise
            self._forced = True
        return self._value


def _short_repr(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_REPR:
        return text[: _MAX_REPR - 3] + "..."
    return text


class DemoHeap:
    """Named roots plus the label registry used to evaluate clicked thunks."""

    def __init__(self, roots: Optional[Mapping[str, Any]] = None, *, max_depth: int = MAX_PARSE_DEPTH) -> None:
        self._lock = threading.Lock()
        self._roots: Dict[str, Any] = dict(roots or {})
        self._max_depth = max(1, int(max_depth))
        self._labels: Dict[int, str] = {}
        self._by_label: Dict[str, Any] = {}
        self._counters = {"b": 0, "t": 0}
        self._truncated: Set[str] = set()

    def boxes(self) -> List[Tuple[Any, str]]:
        with self._lock:
            return [(value, name) for name, value in self._roots.items()]

    def _label_locked(self, value: Any) -> str:
        key = id(value)
        label = self._labels.get(key)
        if label is None:
            prefix = "t" if isinstance(value, Thunk) else "b"
            label = f"{prefix}{self._counters[prefix]}"
            self._counters[prefix] += 1
            self._labels[key] = label
            self._by_label[label] = value
        return label

    def parse_boxes(self, boxes: Sequence[Tuple[Any, str]]) -> List[List[VisObject]]:
        seen: Set[int] = set()
        with self._lock:
            return [[self._parse(value, seen, 0)] for value, _ in boxes]

    def _parse(self, value: Any, seen: Set[int], depth: int) -> VisObject:
        while isinstance(value, Thunk):
            if not value.forced:
                return Link(self._label_locked(value))
            value = value.value
        if isinstance(value, _SCALAR_TYPES):
            return Unnamed(_short_repr(value))
        if isinstance(value, (list, tuple, dict)):
            label = self._label_locked(value)
            if id(value) in seen:
                return Link(label)
            if depth >= self._max_depth:
                self._truncated.add(label)
                return Link(label)
            seen.add(id(value))
            children: List[VisObject] = []
            if isinstance(value, dict):
                for key, item in value.items():
                    children.append(Unnamed(f"{_short_repr(key)} ="))
                    children.append(self._parse(item, seen, depth + 1))
            else:
                for item in value:
                    children.append(self._parse(item, seen, depth + 1))
            return Named(label, tuple(children))
        if callable(value):
            return Function(getattr(value, "__name__", None) or self._label_locked(value))
        return Unnamed(_short_repr(value))

    def evaluate(self, label: str) -> bool:
        """Force the thunk behind ``label``.

        A box cut off at the depth limit is instead added as a root of its
        own, so deep structures can be unfolded one click at a time.  Other
        labels are ignored.
        """
        with self._lock:
            target = self._by_label.get(label)
            if label in self._truncated and label not in self._roots:
                self._roots[label] = target
                _CLIENT_LOGGER.debug("Unfolded %s into its own row", label)
                return True
        if not isinstance(target, Thunk) or target.forced:
            _CLIENT_LOGGER.debug("Nothing to evaluate for %s", label)
            return False
        target.force()
        _CLIENT_LOGGER.debug("Forced thunk %s", label)
        return True


def naturals(start: int = 0) -> List[Any]:
    """Lazy cons list ``[n, <thunk for the rest>]``."""
    return [start, Thunk(lambda: naturals(start + 1))]


def build_demo_heap() -> DemoHeap:
    xs = [1, 2, 3]

    def inc(value: int) -> int:
        return value + 1

    return DemoHeap(
        {
            "xs": xs,
            "squares": Thunk(lambda: [n * n for n in range(4)]),
            "pair": (xs, "shared"),
            "nats": naturals(0),
            "inc": inc,
            "config": {"depth": 2, "items": xs},
        }
    )
