"""Uniform scale-to-fit mapping from natural layout space to canvas pixels."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from heap_view.vis_objects import BoundingBox, HitEntry

DEFAULT_WIDTH_FILL_RATIO = 0.97
DEFAULT_HEIGHT_FILL_RATIO = 0.99


@dataclass(frozen=True)
class AffineTransform:
    """Uniform scale followed by a translation: ``p' = p * scale + offset``."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def map_point(self, x: float, y: float) -> Tuple[float, float]:
        return x * self.scale + self.offset_x, y * self.scale + self.offset_y

    def invert_point(self, x: float, y: float) -> Tuple[float, float]:
        if self.scale == 0.0:
            return 0.0, 0.0
        return (x - self.offset_x) / self.scale, (y - self.offset_y) / self.scale

    def map_box(self, box: BoundingBox) -> BoundingBox:
        x, y = self.map_point(box.x, box.y)
        return BoundingBox(x, y, box.width * self.scale, box.height * self.scale)

    def invert_box(self, box: BoundingBox) -> BoundingBox:
        if self.scale == 0.0:
            return BoundingBox(0.0, 0.0, 0.0, 0.0)
        x, y = self.invert_point(box.x, box.y)
        return BoundingBox(x, y, box.width / self.scale, box.height / self.scale)


def available_area(
    canvas_width: float,
    canvas_height: float,
    width_ratio: float = DEFAULT_WIDTH_FILL_RATIO,
    height_ratio: float = DEFAULT_HEIGHT_FILL_RATIO,
) -> Tuple[float, float]:
    """Shrink the canvas a little; measured text can render slightly larger than reported."""
    return width_ratio * max(float(canvas_width), 0.0), height_ratio * max(float(canvas_height), 0.0)


def fit_scale(natural_width: float, natural_height: float, available_width: float, available_height: float) -> float:
    ratios = []
    if natural_width > 0.0:
        ratios.append(available_width / natural_width)
    if natural_height > 0.0:
        ratios.append(available_height / natural_height)
    if not ratios:
        return 1.0
    scale = min(ratios)
    if not math.isfinite(scale) or scale < 0.0:
        return 0.0
    return scale


def fit_transform(
    natural_width: float,
    natural_height: float,
    canvas_width: float,
    canvas_height: float,
    width_ratio: float = DEFAULT_WIDTH_FILL_RATIO,
    height_ratio: float = DEFAULT_HEIGHT_FILL_RATIO,
) -> AffineTransform:
    avail_w, avail_h = available_area(canvas_width, canvas_height, width_ratio, height_ratio)
    return AffineTransform(scale=fit_scale(natural_width, natural_height, avail_w, avail_h))


def map_entries(entries: Iterable[HitEntry], transform: AffineTransform) -> Tuple[HitEntry, ...]:
    return tuple((label, transform.map_box(box)) for label, box in entries)
