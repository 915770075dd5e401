"""PyQt6 widget hosting the heap list view."""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QPainter
from PyQt6.QtWidgets import QWidget

from heap_view.list_view import Box, ListViewController
from heap_view.painter_adapter import QtPathPainterAdapter
from heap_view.text_metrics import CachingTextMetrics, QtTextMetrics, build_font


class HeapListWidget(QWidget):
    """Canvas widget: paints the controller's frame and forwards pointer events."""

    def __init__(self, controller: ListViewController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        settings = controller.settings
        self._font = build_font(settings.font_family, settings.font_size)
        self._metrics = CachingTextMetrics(QtTextMetrics(self._font))
        self._line_width = settings.line_width
        self._pointer: Optional[Tuple[float, float]] = None
        self.setMouseTracking(True)
        self.resize(settings.window_width, settings.window_height)

    @property
    def controller(self) -> ListViewController:
        return self._controller

    def pointer_position(self) -> Optional[Tuple[float, float]]:
        return self._pointer

    def refresh(self, boxes: Sequence[Box]) -> None:
        self._controller.update_objects(boxes, self)

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
        try:
            painter.fillRect(self.rect(), QColor("white"))
            adapter = QtPathPainterAdapter(painter, self._font, line_width=self._line_width)
            self._controller.redraw(self, adapter, self._metrics)
        finally:
            painter.end()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        position = event.position()
        self._pointer = (position.x(), position.y())
        self._controller.move(self)
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.click()
        super().mousePressEvent(event)

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        self._pointer = None
        self._controller.move(self)
        super().leaveEvent(event)
