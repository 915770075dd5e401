"""Version string of the heap list view and the debug-logging default derived from it."""
from __future__ import annotations

import os
import re
from typing import Optional

__version__ = "0.3.0-dev"
DEV_MODE_ENV_VAR = "HEAP_VIEW_DEV_MODE"

_ENV_SWITCH = {"1": True, "true": True, "yes": True, "on": True, "0": False, "false": False, "no": False, "off": False}


def is_dev_build(version: Optional[str] = None) -> bool:
    """True when ``HEAP_VIEW_DEV_MODE`` says so, or the version carries a ``dev`` segment."""
    switch = _ENV_SWITCH.get(os.getenv(DEV_MODE_ENV_VAR, "").strip().lower())
    if switch is not None:
        return switch
    identifier = (version or __version__ or "").lower()
    return any(segment.startswith("dev") for segment in re.split(r"[.\-+]", identifier))
