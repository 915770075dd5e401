"""Render the current heap list frame to an SVG or PNG file."""
from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QRect, QSize
from PyQt6.QtGui import QColor, QImage, QPainter
from PyQt6.QtSvg import QSvgGenerator

from heap_view.layout_engine import FrameLayout
from heap_view.list_view import ListViewController
from heap_view.painter_adapter import QtPathPainterAdapter
from heap_view.text_metrics import QtTextMetrics, build_font

_CLIENT_LOGGER = logging.getLogger("HeapView.Client")

SUPPORTED_SUFFIXES = (".svg", ".png")


def _paint_into(controller: ListViewController, painter: QPainter, width: int, height: int) -> FrameLayout:
    settings = controller.settings
    font = build_font(settings.font_family, settings.font_size)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.fillRect(QRect(0, 0, width, height), QColor("white"))
    adapter = QtPathPainterAdapter(painter, font, line_width=settings.line_width)
    return controller.paint(width, height, adapter, QtTextMetrics(font))


def export_frame(controller: ListViewController, path: Path, width: int, height: int) -> FrameLayout:
    """Paint the controller's objects at ``width`` x ``height``; hover and hit index are untouched."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported export format {path.suffix!r}; use .svg or .png")
    if not path.parent.is_dir():
        raise OSError(f"Export directory does not exist: {path.parent}")
    width = max(1, int(width))
    height = max(1, int(height))

    if suffix == ".svg":
        generator = QSvgGenerator()
        generator.setFileName(str(path))
        generator.setSize(QSize(width, height))
        generator.setViewBox(QRect(0, 0, width, height))
        generator.setTitle("Heap list view")
        painter = QPainter(generator)
        try:
            frame = _paint_into(controller, painter, width, height)
        finally:
            painter.end()
    else:
        image = QImage(width, height, QImage.Format.Format_ARGB32)
        painter = QPainter(image)
        try:
            frame = _paint_into(controller, painter, width, height)
        finally:
            painter.end()
        if not image.save(str(path)):
            raise OSError(f"Failed to write {path}")
    _CLIENT_LOGGER.info("Exported %dx%d frame to %s", width, height, path)
    return frame
