"""Run the heap view test suite from a plain checkout.

Usage:
    python tests/configure_pytest_environment.py [pytest args]

Puts the repository root on sys.path (so ``version`` and ``heap_view``
import without an editable install), selects Qt's offscreen platform when no
display is available and hands the remaining arguments to pytest.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

_DEFAULT_TARGETS = ["heap_view/tests", "tests"]


def _require(module: str, hint: str) -> None:
    try:
        __import__(module)
    except ImportError as exc:
        print(f"{module} is not installed; {hint}", file=sys.stderr)
        raise SystemExit(1) from exc


def _prefer_offscreen_platform() -> None:
    if sys.platform.startswith("linux") and not os.environ.get("DISPLAY") and not os.environ.get("WAYLAND_DISPLAY"):
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def main(argv: list[str]) -> int:
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))
    os.chdir(root)

    _require("pytest", "install the test extra with `pip install -e .[test]`.")
    _require("PyQt6", "install it with `pip install PyQt6`.")
    _prefer_offscreen_platform()

    import pytest

    return pytest.main(argv or list(_DEFAULT_TARGETS))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
