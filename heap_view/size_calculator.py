"""Width/height rules for visual objects (pure; measurement only)."""
from __future__ import annotations

from typing import Iterable, Sequence

from heap_view.text_metrics import TextMetricsAdapter
from heap_view.vis_objects import Function, Link, Named, Unnamed, VisObject

BOX_MARGIN = 10.0
PILL_EXTRA_HEIGHT = 10.0
NAMED_EXTRA_HEIGHT = 15.0


def ink_advance(metrics: TextMetricsAdapter, text: str) -> float:
    bearing, advance = metrics.ink_extent(text)
    return advance - bearing


def object_width(metrics: TextMetricsAdapter, obj: VisObject) -> float:
    if isinstance(obj, Named):
        children = sum(object_width(metrics, child) for child in obj.children)
        return max(ink_advance(metrics, obj.label), children) + BOX_MARGIN
    if isinstance(obj, Unnamed):
        return metrics.advance_width(obj.text) + BOX_MARGIN
    if isinstance(obj, (Link, Function)):
        return metrics.advance_width(obj.target) + BOX_MARGIN
    raise TypeError(f"Unsupported visual object: {obj!r}")


def row_width(metrics: TextMetricsAdapter, objects: Iterable[VisObject]) -> float:
    return sum(object_width(metrics, obj) for obj in objects)


def objects_height(metrics: TextMetricsAdapter, objects: Sequence[VisObject]) -> float:
    """Tallest object among siblings sharing a row; 0 for an empty row."""
    line_height = metrics.font_metrics().line_height

    def _height(obj: VisObject) -> float:
        if isinstance(obj, Named):
            nested = max((_height(child) for child in obj.children), default=0.0)
            return line_height + NAMED_EXTRA_HEIGHT + nested
        if isinstance(obj, Unnamed):
            return line_height
        if isinstance(obj, (Link, Function)):
            return line_height + PILL_EXTRA_HEIGHT
        raise TypeError(f"Unsupported visual object: {obj!r}")

    return max((_height(obj) for obj in objects), default=0.0)
