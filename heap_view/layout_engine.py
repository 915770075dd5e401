"""Layout and paint pass for the heap list view.

Layout is a pure function of the visual objects and the text metrics: it
returns a geometry tree in natural (unscaled) coordinates, including every
picking box.  Painting walks that tree and issues path calls; it never feeds
positions back into layout, so the hit index always matches what was drawn.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from heap_view.painter_adapter import BLACK, PathPainterAdapter, fill_and_surround, rounded_rect, saved_state
from heap_view.scale_fit import (
    DEFAULT_HEIGHT_FILL_RATIO,
    DEFAULT_WIDTH_FILL_RATIO,
    AffineTransform,
    fit_transform,
    map_entries,
)
from heap_view.size_calculator import ink_advance, object_width, objects_height, row_width
from heap_view.text_metrics import TextMetricsAdapter
from heap_view.view_config import Palette
from heap_view.vis_objects import BoundingBox, Function, HitEntry, Link, Named, TopLevelEntry, Unnamed, VisObject

_CLIENT_LOGGER = logging.getLogger("HeapView.Client")

PADDING = 5.0
ROW_GAP = 30.0
FIRST_ROW_OFFSET = 30.0
NAME_SUFFIX = ": "


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str


@dataclass(frozen=True)
class NodeGeometry:
    """Placed visual object; ``kind`` is unnamed, named, link or function."""

    kind: str
    key: Optional[str]
    text: TextRun
    advance: float
    box: Optional[BoundingBox] = None
    divider_y: Optional[float] = None
    children: Tuple["NodeGeometry", ...] = field(default_factory=tuple)

    def hit_entries(self) -> List[HitEntry]:
        """Children's entries first, then this node's own box."""
        entries: List[HitEntry] = []
        for child in self.children:
            entries.extend(child.hit_entries())
        if self.key is not None and self.box is not None:
            entries.append((self.key, self.box))
        return entries


@dataclass(frozen=True)
class RowGeometry:
    name: TextRun
    baseline: float
    height: float
    width: float
    nodes: Tuple[NodeGeometry, ...]

    def hit_entries(self) -> List[HitEntry]:
        entries: List[HitEntry] = []
        for node in self.nodes:
            entries.extend(node.hit_entries())
        return entries


@dataclass(frozen=True)
class FrameLayout:
    rows: Tuple[RowGeometry, ...]
    name_column_width: float
    natural_width: float
    natural_height: float
    transform: AffineTransform
    bounds: Tuple[HitEntry, ...]


def _pill_kind(obj: VisObject) -> str:
    return "function" if isinstance(obj, Function) else "link"


def layout_object(metrics: TextMetricsAdapter, obj: VisObject, x: float, baseline: float) -> NodeGeometry:
    """Place ``obj`` with its left edge at ``x`` and its text baseline at ``baseline``."""
    width = object_width(metrics, obj)
    if isinstance(obj, Unnamed):
        return NodeGeometry(
            kind="unnamed",
            key=None,
            text=TextRun(x + PADDING / 2, baseline, obj.text),
            advance=width,
        )

    extents = metrics.font_metrics()
    top = baseline - extents.ascent - PADDING
    if isinstance(obj, (Link, Function)):
        return NodeGeometry(
            kind=_pill_kind(obj),
            key=obj.target,
            text=TextRun(x + PADDING, baseline, obj.target),
            advance=width,
            box=BoundingBox(x, top, width, extents.line_height + 10.0),
        )
    if isinstance(obj, Named):
        nested_height = objects_height(metrics, obj.children)
        children: List[NodeGeometry] = []
        cursor = x + PADDING
        for child in obj.children:
            placed = layout_object(metrics, child, cursor, baseline)
            children.append(placed)
            cursor += placed.advance
        label_x = x + width / 2 - ink_advance(metrics, obj.label) / 2
        return NodeGeometry(
            kind="named",
            key=obj.label,
            text=TextRun(label_x, baseline + nested_height + 7.5 - PADDING, obj.label),
            advance=width,
            box=BoundingBox(x, top, width, extents.line_height + 10.0 + nested_height),
            divider_y=baseline + nested_height + 5.0 - extents.ascent - PADDING,
            children=tuple(children),
        )
    raise TypeError(f"Unsupported visual object: {obj!r}")


def layout_row(
    metrics: TextMetricsAdapter,
    entry: TopLevelEntry,
    baseline: float,
    name_column_width: float,
) -> RowGeometry:
    name = layout_object(metrics, Unnamed(entry.name + NAME_SUFFIX), 0.0, baseline)
    nodes: List[NodeGeometry] = []
    cursor = name_column_width
    for obj in entry.objects:
        placed = layout_object(metrics, obj, cursor, baseline)
        nodes.append(placed)
        cursor += placed.advance
    return RowGeometry(
        name=name.text,
        baseline=baseline,
        height=objects_height(metrics, entry.objects),
        width=name_column_width + row_width(metrics, entry.objects),
        nodes=tuple(nodes),
    )


def name_column_width(metrics: TextMetricsAdapter, entries: Sequence[TopLevelEntry]) -> float:
    return max(
        (object_width(metrics, Unnamed(entry.name + NAME_SUFFIX)) for entry in entries),
        default=0.0,
    )


def row_baselines(heights: Sequence[float]) -> List[float]:
    """Row i starts at ``30 + sum(height_j + 30 for j < i)``."""
    baselines: List[float] = []
    position = FIRST_ROW_OFFSET
    for height in heights:
        baselines.append(position)
        position += height + ROW_GAP
    return baselines


def natural_extent(heights: Sequence[float], widths: Sequence[float]) -> Tuple[float, float]:
    natural_width = max([1.0, *widths])
    natural_height = 0.0
    if heights:
        natural_height = sum(height + ROW_GAP for height in heights) - ROW_GAP / 2
    return natural_width, natural_height


def layout_frame(
    metrics: TextMetricsAdapter,
    entries: Sequence[TopLevelEntry],
    canvas_width: float,
    canvas_height: float,
    *,
    width_ratio: float = DEFAULT_WIDTH_FILL_RATIO,
    height_ratio: float = DEFAULT_HEIGHT_FILL_RATIO,
) -> FrameLayout:
    column = name_column_width(metrics, entries)
    heights = [objects_height(metrics, entry.objects) for entry in entries]
    rows = tuple(
        layout_row(metrics, entry, baseline, column)
        for entry, baseline in zip(entries, row_baselines(heights))
    )
    natural_width, natural_height = natural_extent(heights, [row.width for row in rows])
    transform = fit_transform(
        natural_width,
        natural_height,
        canvas_width,
        canvas_height,
        width_ratio,
        height_ratio,
    )
    natural_entries: List[HitEntry] = []
    for row in rows:
        natural_entries.extend(row.hit_entries())
    return FrameLayout(
        rows=rows,
        name_column_width=column,
        natural_width=natural_width,
        natural_height=natural_height,
        transform=transform,
        bounds=map_entries(natural_entries, transform),
    )


def _paint_text(painter: PathPainterAdapter, run: TextRun) -> None:
    painter.move_to(run.x, run.y)
    painter.show_text(run.text)


def paint_node(painter: PathPainterAdapter, node: NodeGeometry, hover: Optional[str], palette: Palette) -> None:
    if node.kind == "unnamed" or node.box is None:
        painter.set_source_rgb(*BLACK)
        _paint_text(painter, node.text)
        return

    box = node.box
    painter.set_line_cap_round()
    rounded_rect(painter, box.x, box.y, box.width, box.height)
    painter.set_source_rgb(*palette.pick(node.kind, hover is not None and hover == node.key))
    fill_and_surround(painter)

    if node.kind == "named":
        if node.divider_y is not None:
            painter.move_to(box.x, node.divider_y)
            painter.line_to(box.x + box.width, node.divider_y)
            painter.stroke()
        with saved_state(painter):
            for child in node.children:
                paint_node(painter, child, hover, palette)
        painter.set_source_rgb(*BLACK)
    _paint_text(painter, node.text)


def paint_frame(painter: PathPainterAdapter, frame: FrameLayout, hover: Optional[str], palette: Palette) -> None:
    transform = frame.transform
    with saved_state(painter):
        painter.translate(transform.offset_x, transform.offset_y)
        painter.scale(transform.scale, transform.scale)
        for row in frame.rows:
            painter.set_source_rgb(*BLACK)
            _paint_text(painter, row.name)
            for node in row.nodes:
                paint_node(painter, node, hover, palette)
    _CLIENT_LOGGER.debug(
        "Painted %d rows (natural=%.1fx%.1f scale=%.3f boxes=%d)",
        len(frame.rows),
        frame.natural_width,
        frame.natural_height,
        transform.scale,
        len(frame.bounds),
    )
