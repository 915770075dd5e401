"""Text measurement adapters used by the size calculator and the layout pass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from PyQt6.QtGui import QFont, QFontMetricsF


@dataclass(frozen=True)
class FontExtents:
    ascent: float
    descent: float
    line_height: float


class TextMetricsAdapter:
    def advance_width(self, text: str) -> float: ...
    def ink_extent(self, text: str) -> Tuple[float, float]: ...
    def font_metrics(self) -> FontExtents: ...


def _non_negative(value: Any) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    if numeric != numeric or numeric < 0.0:
        return 0.0
    return numeric


def build_font(family: str, pixel_size: float) -> QFont:
    font = QFont(family)
    font.setPixelSize(max(1, int(round(pixel_size))))
    font.setWeight(QFont.Weight.Normal)
    return font


class QtTextMetrics(TextMetricsAdapter):
    """Measure strings with ``QFontMetricsF`` for a single fixed font.

    ``ink_extent`` reports the left bearing of the glyph ink box together with
    the pen advance, so ``advance - bearing`` is the width the text visually
    occupies.
    """

    def __init__(self, font: QFont) -> None:
        self._font = font
        self._metrics = QFontMetricsF(font)

    @property
    def font(self) -> QFont:
        return self._font

    def advance_width(self, text: str) -> float:
        if not text:
            return 0.0
        return _non_negative(self._metrics.horizontalAdvance(text))

    def ink_extent(self, text: str) -> Tuple[float, float]:
        if not text:
            return 0.0, 0.0
        ink = self._metrics.boundingRect(text)
        return float(ink.left()), _non_negative(self._metrics.horizontalAdvance(text))

    def font_metrics(self) -> FontExtents:
        return FontExtents(
            ascent=_non_negative(self._metrics.ascent()),
            descent=_non_negative(self._metrics.descent()),
            line_height=_non_negative(self._metrics.lineSpacing()),
        )


class CachingTextMetrics(TextMetricsAdapter):
    """Memoise per-string measurements of another adapter.

    Every repaint measures the same labels several times (once for widths,
    again while positioning).  The widget owns one cache per font, so entries
    never need invalidating.
    """

    _DEFAULT_MAX_ENTRIES = 512

    def __init__(self, inner: TextMetricsAdapter, max_entries: int = _DEFAULT_MAX_ENTRIES) -> None:
        self._inner = inner
        self._max_entries = max(1, int(max_entries))
        self._advance_cache: Dict[str, float] = {}
        self._ink_cache: Dict[str, Tuple[float, float]] = {}
        self._font_extents: Optional[FontExtents] = None

    def _remember(self, cache: Dict[str, Any], key: str, value: Any) -> None:
        cache[key] = value
        if len(cache) > self._max_entries:
            cache.pop(next(iter(cache)))

    def advance_width(self, text: str) -> float:
        cached = self._advance_cache.get(text)
        if cached is None:
            cached = self._inner.advance_width(text)
            self._remember(self._advance_cache, text, cached)
        return cached

    def ink_extent(self, text: str) -> Tuple[float, float]:
        cached = self._ink_cache.get(text)
        if cached is None:
            cached = self._inner.ink_extent(text)
            self._remember(self._ink_cache, text, cached)
        return cached

    def font_metrics(self) -> FontExtents:
        if self._font_extents is None:
            self._font_extents = self._inner.font_metrics()
        return self._font_extents
