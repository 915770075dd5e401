"""Per-view state shared by the paint pass and the interaction controller."""
from __future__ import annotations

import threading
from typing import Optional, Tuple

from heap_view.hit_index import HitIndex
from heap_view.vis_objects import TopLevelEntry


class ViewState:
    """Objects on screen, picking boxes of the last frame and the hovered label.

    Created with the view and discarded with it.  ``lock`` guards every
    read-modify-write of the three slices.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.objects: Tuple[TopLevelEntry, ...] = ()
        self.bounds = HitIndex()
        self.hover: Optional[str] = None

    def snapshot(self) -> Tuple[Tuple[TopLevelEntry, ...], Optional[str]]:
        with self.lock:
            return self.objects, self.hover
