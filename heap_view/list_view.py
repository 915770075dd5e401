"""Interaction controller for the heap list view (redraw, move, click, update)."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

from heap_view.hit_index import HitIndex
from heap_view.layout_engine import FrameLayout, layout_frame, paint_frame
from heap_view.painter_adapter import PathPainterAdapter
from heap_view.text_metrics import TextMetricsAdapter
from heap_view.view_config import ViewSettings
from heap_view.view_state import ViewState
from heap_view.vis_objects import TopLevelEntry, VisObject, collect_keys

_CLIENT_LOGGER = logging.getLogger("HeapView.Client")

Box = Tuple[Any, str]
BoxParser = Callable[[Sequence[Box]], Sequence[Sequence[VisObject]]]


class CanvasHandle(Protocol):  # type: ignore[name-defined]
    def width(self) -> int: ...
    def height(self) -> int: ...
    def update(self) -> None: ...
    def pointer_position(self) -> Optional[Tuple[float, float]]: ...


class ListViewController:
    """Owns a ``ViewState`` and applies toolkit notifications to it.

    ``parse_boxes`` turns ``(reference, label)`` pairs into one object row per
    pair; ``evaluate`` forces the object behind a clicked label and
    ``signal_update`` asks the data source to refresh the view afterwards.
    """

    def __init__(
        self,
        parse_boxes: BoxParser,
        evaluate: Callable[[str], Any],
        signal_update: Callable[[], Any],
        *,
        settings: Optional[ViewSettings] = None,
        state: Optional[ViewState] = None,
    ) -> None:
        self._parse_boxes = parse_boxes
        self._evaluate = evaluate
        self._signal_update = signal_update
        self._settings = settings or ViewSettings()
        self._state = state or ViewState()

    # Public API -----------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def settings(self) -> ViewSettings:
        return self._settings

    @property
    def hover(self) -> Optional[str]:
        with self._state.lock:
            return self._state.hover

    @property
    def bounds(self) -> HitIndex:
        return self._state.bounds

    def _layout(
        self,
        objects: Sequence[TopLevelEntry],
        canvas_width: float,
        canvas_height: float,
        metrics: TextMetricsAdapter,
    ) -> FrameLayout:
        return layout_frame(
            metrics,
            objects,
            canvas_width,
            canvas_height,
            width_ratio=self._settings.width_fill_ratio,
            height_ratio=self._settings.height_fill_ratio,
        )

    def layout(self, canvas_width: float, canvas_height: float, metrics: TextMetricsAdapter) -> FrameLayout:
        objects, _ = self._state.snapshot()
        return self._layout(objects, canvas_width, canvas_height, metrics)

    def paint(
        self,
        canvas_width: float,
        canvas_height: float,
        painter: PathPainterAdapter,
        metrics: TextMetricsAdapter,
    ) -> FrameLayout:
        """Lay out and paint the current objects without touching the hit index."""
        objects, hover = self._state.snapshot()
        frame = self._layout(objects, canvas_width, canvas_height, metrics)
        paint_frame(painter, frame, hover, self._settings.palette)
        return frame

    def redraw(self, canvas: CanvasHandle, painter: PathPainterAdapter, metrics: TextMetricsAdapter) -> FrameLayout:
        frame = self.paint(canvas.width(), canvas.height(), painter, metrics)
        with self._state.lock:
            self._state.bounds.replace(frame.bounds)
        return frame

    def move(self, canvas: CanvasHandle) -> bool:
        """Update the hover from the pointer; repaint only when it changed."""
        position = canvas.pointer_position()
        with self._state.lock:
            previous = self._state.hover
            current = self._state.bounds.lookup(*position) if position is not None else None
            self._state.hover = current
        if current == previous:
            return False
        _CLIENT_LOGGER.debug("Hover changed from %s to %s", previous, current)
        canvas.update()
        return True

    def click(self) -> bool:
        with self._state.lock:
            target = self._state.hover
        if target is None:
            return False
        _CLIENT_LOGGER.info("Evaluating %s", target)
        try:
            self._evaluate(target)
            self._signal_update()
        except Exception as exc:
            _CLIENT_LOGGER.error("Evaluate action for %s failed: %s", target, exc, exc_info=exc)
            raise
        return True

    def update_objects(self, boxes: Sequence[Box], canvas: Optional[CanvasHandle] = None) -> None:
        """Replace the object forest from fresh ``(reference, label)`` pairs."""
        boxes = list(boxes)
        rows = list(self._parse_boxes(boxes))
        if len(rows) != len(boxes):
            _CLIENT_LOGGER.warning("Box parser returned %d rows for %d boxes", len(rows), len(boxes))
        entries = tuple(TopLevelEntry(name, tuple(row)) for (_, name), row in zip(boxes, rows))
        with self._state.lock:
            self._state.objects = entries
            if self._state.hover is not None and self._state.hover not in collect_keys(entries):
                self._state.hover = None
        _CLIENT_LOGGER.debug("Objects updated (%d entries)", len(entries))
        if canvas is not None:
            canvas.update()
