"""Configuration helpers for the heap list view."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

_CLIENT_LOGGER = logging.getLogger("HeapView.Client")

RGB = Tuple[float, float, float]

SETTINGS_FILENAME = "heap_view_settings.json"


@dataclass(frozen=True)
class ColorPair:
    base: RGB
    highlighted: RGB

    def pick(self, highlighted: bool) -> RGB:
        return self.highlighted if highlighted else self.base


@dataclass(frozen=True)
class Palette:
    named: ColorPair = ColorPair(base=(0.5, 1.0, 0.5), highlighted=(0.0, 1.0, 0.0))
    link: ColorPair = ColorPair(base=(0.5, 0.5, 1.0), highlighted=(0.25, 0.25, 1.0))
    function: ColorPair = ColorPair(base=(1.0, 0.5, 0.5), highlighted=(1.0, 0.0, 0.0))

    def pick(self, kind: str, highlighted: bool) -> RGB:
        pair = getattr(self, kind, None)
        if not isinstance(pair, ColorPair):
            raise KeyError(kind)
        return pair.pick(highlighted)


@dataclass
class ViewSettings:
    """Values used to build fonts, the fit transform and the window."""

    font_family: str = "DejaVu Sans"
    font_size: float = 15.0
    width_fill_ratio: float = 0.97
    height_fill_ratio: float = 0.99
    line_width: float = 2.0
    window_width: int = 800
    window_height: int = 600
    log_retention: int = 5
    palette: Palette = field(default_factory=Palette)


def _clamped_float(data: Dict[str, Any], key: str, default: float, low: float, high: float) -> float:
    try:
        value = float(data.get(key, default))
    except (TypeError, ValueError):
        _CLIENT_LOGGER.warning("Ignoring invalid %s in view settings: %r", key, data.get(key))
        return default
    if not math.isfinite(value):
        return default
    return max(low, min(value, high))


def _clamped_int(data: Dict[str, Any], key: str, default: int, low: int) -> int:
    try:
        value = int(data.get(key, default))
    except (TypeError, ValueError):
        _CLIENT_LOGGER.warning("Ignoring invalid %s in view settings: %r", key, data.get(key))
        return default
    return max(low, value)


def parse_color(value: Any) -> Optional[RGB]:
    """Accept ``[r, g, b]`` floats in 0..1 or a ``#rrggbb`` string."""
    if isinstance(value, str):
        token = value.strip().lstrip("#")
        if len(token) != 6:
            return None
        try:
            channels = [int(token[idx : idx + 2], 16) / 255.0 for idx in (0, 2, 4)]
        except ValueError:
            return None
        return channels[0], channels[1], channels[2]
    if isinstance(value, (list, tuple)) and len(value) == 3:
        try:
            channels = [float(component) for component in value]
        except (TypeError, ValueError):
            return None
        if not all(math.isfinite(c) and 0.0 <= c <= 1.0 for c in channels):
            return None
        return channels[0], channels[1], channels[2]
    return None


def _parse_pair(raw: Any, default: ColorPair) -> ColorPair:
    if not isinstance(raw, dict):
        return default
    base = parse_color(raw.get("base")) if "base" in raw else default.base
    highlighted = parse_color(raw.get("highlighted")) if "highlighted" in raw else default.highlighted
    if base is None or highlighted is None:
        _CLIENT_LOGGER.warning("Ignoring invalid color pair in view settings: %r", raw)
        return default
    return ColorPair(base=base, highlighted=highlighted)


def parse_palette(raw: Any) -> Palette:
    defaults = Palette()
    if not isinstance(raw, dict):
        return defaults
    return Palette(
        named=_parse_pair(raw.get("named"), defaults.named),
        link=_parse_pair(raw.get("link"), defaults.link),
        function=_parse_pair(raw.get("function"), defaults.function),
    )


def load_view_settings(settings_path: Path) -> ViewSettings:
    """Read view defaults from heap_view_settings.json if it exists."""
    defaults = ViewSettings()
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        _CLIENT_LOGGER.debug("View settings not found at %s; using defaults", settings_path)
        return defaults

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        _CLIENT_LOGGER.warning("Failed to parse %s; using default view settings (%s)", settings_path, exc)
        return defaults
    if not isinstance(data, dict):
        _CLIENT_LOGGER.warning("View settings at %s are not a JSON object; using defaults", settings_path)
        return defaults

    family = str(data.get("font_family") or defaults.font_family).strip() or defaults.font_family
    return ViewSettings(
        font_family=family,
        font_size=_clamped_float(data, "font_size", defaults.font_size, 4.0, 96.0),
        width_fill_ratio=_clamped_float(data, "width_fill_ratio", defaults.width_fill_ratio, 0.1, 1.0),
        height_fill_ratio=_clamped_float(data, "height_fill_ratio", defaults.height_fill_ratio, 0.1, 1.0),
        line_width=_clamped_float(data, "line_width", defaults.line_width, 0.0, 10.0),
        window_width=_clamped_int(data, "window_width", defaults.window_width, 100),
        window_height=_clamped_int(data, "window_height", defaults.window_height, 100),
        log_retention=_clamped_int(data, "log_retention", defaults.log_retention, 1),
        palette=parse_palette(data.get("palette")),
    )
