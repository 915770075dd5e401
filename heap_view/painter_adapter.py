"""Path-drawing primitives and their QPainter implementation."""
from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QPainter, QPainterPath, QPen

RGB = Tuple[float, float, float]
BLACK: RGB = (0.0, 0.0, 0.0)


class PathPainterAdapter:
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def arc_negative(self, xc: float, yc: float, radius: float, angle1: float, angle2: float) -> None: ...
    def close_path(self) -> None: ...
    def fill_preserve(self) -> None: ...
    def stroke(self) -> None: ...
    def show_text(self, text: str) -> None: ...
    def set_source_rgb(self, red: float, green: float, blue: float) -> None: ...
    def set_line_cap_round(self) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def scale(self, sx: float, sy: float) -> None: ...


@contextmanager
def saved_state(painter: PathPainterAdapter) -> Iterator[PathPainterAdapter]:
    """Pair ``save``/``restore`` so the transform is popped on every exit path."""
    painter.save()
    try:
        yield painter
    finally:
        painter.restore()


def rounded_rect(painter: PathPainterAdapter, x: float, y: float, width: float, height: float) -> None:
    pad = min(width, height) / 10.0
    painter.move_to(x, y + pad)
    painter.line_to(x, y + height - pad)
    painter.arc_negative(x + pad, y + height - pad, pad, math.pi, math.pi / 2)
    painter.line_to(x + width - pad, y + height)
    painter.arc_negative(x + width - pad, y + height - pad, pad, math.pi / 2, 0.0)
    painter.line_to(x + width, y + pad)
    painter.arc_negative(x + width - pad, y + pad, pad, 0.0, -math.pi / 2)
    painter.line_to(x + pad, y)
    painter.arc_negative(x + pad, y + pad, pad, -math.pi / 2, -math.pi)
    painter.close_path()


def fill_and_surround(painter: PathPainterAdapter) -> None:
    painter.fill_preserve()
    painter.set_source_rgb(*BLACK)
    painter.stroke()


class QtPathPainterAdapter(PathPainterAdapter):
    """Drive a ``QPainter`` with cairo-style path calls.

    Paths accumulate in a ``QPainterPath`` until ``stroke``; ``show_text``
    draws at the current point on the text baseline and advances it.
    """

    def __init__(self, painter: QPainter, font: QFont, *, line_width: float = 2.0) -> None:
        self._painter = painter
        self._font = font
        self._font_metrics = QFontMetricsF(font)
        self._line_width = max(0.0, float(line_width))
        self._path = QPainterPath()
        self._point = QPointF(0.0, 0.0)
        self._color = QColor(0, 0, 0)
        self._cap = Qt.PenCapStyle.FlatCap
        self._saved: List[Tuple[QColor, Qt.PenCapStyle]] = []

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)
        self._point = QPointF(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(x, y)
        self._point = QPointF(x, y)

    def arc_negative(self, xc: float, yc: float, radius: float, angle1: float, angle2: float) -> None:
        while angle2 > angle1:
            angle2 -= 2 * math.pi
        rect = QRectF(xc - radius, yc - radius, 2 * radius, 2 * radius)
        # Qt measures angles counter-clockwise on screen, the opposite sense to cairo.
        self._path.arcTo(rect, -math.degrees(angle1), math.degrees(angle1 - angle2))
        self._point = QPointF(xc + radius * math.cos(angle2), yc + radius * math.sin(angle2))

    def close_path(self) -> None:
        self._path.closeSubpath()

    def fill_preserve(self) -> None:
        self._painter.fillPath(self._path, QBrush(self._color))

    def stroke(self) -> None:
        pen = QPen(self._color)
        pen.setWidthF(self._line_width)
        pen.setCapStyle(self._cap)
        self._painter.strokePath(self._path, pen)
        self._path = QPainterPath()

    def show_text(self, text: str) -> None:
        self._painter.setFont(self._font)
        self._painter.setPen(QPen(self._color))
        self._painter.drawText(self._point, text)
        self._point = QPointF(self._point.x() + self._font_metrics.horizontalAdvance(text), self._point.y())

    def set_source_rgb(self, red: float, green: float, blue: float) -> None:
        self._color = QColor.fromRgbF(red, green, blue)

    def set_line_cap_round(self) -> None:
        self._cap = Qt.PenCapStyle.RoundCap

    def save(self) -> None:
        self._saved.append((QColor(self._color), self._cap))
        self._painter.save()

    def restore(self) -> None:
        self._painter.restore()
        if self._saved:
            self._color, self._cap = self._saved.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._painter.translate(dx, dy)

    def scale(self, sx: float, sy: float) -> None:
        self._painter.scale(sx, sy)
