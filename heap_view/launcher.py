from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QStandardPaths, QTimer
from PyQt6.QtWidgets import QApplication

from heap_view.demo_heap import DemoHeap, build_demo_heap
from heap_view.exporter import export_frame
from heap_view.list_view import ListViewController
from heap_view.list_widget import HeapListWidget
from heap_view.logging_utils import LOGGER_NAME, apply_log_level_hint, configure_client_logging, resolve_log_level
from heap_view.view_config import SETTINGS_FILENAME, ViewSettings, load_view_settings
from version import DEV_MODE_ENV_VAR, __version__, is_dev_build

CLIENT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CLIENT_DIR.parent
APP_DIR_NAME = "heap-view"
SETTINGS_ENV_VAR = "HEAP_VIEW_SETTINGS"

_CLIENT_LOGGER = logging.getLogger(LOGGER_NAME)


def running_from_checkout() -> bool:
    return (PROJECT_ROOT / "pyproject.toml").is_file()


def _user_dir(location: QStandardPaths.StandardLocation) -> Path:
    base = QStandardPaths.writableLocation(location)
    return (Path(base) if base else Path.home()) / APP_DIR_NAME


def default_config_dir() -> Path:
    """Checkout root when run from source, else the per-user config directory."""
    if running_from_checkout():
        return PROJECT_ROOT
    return _user_dir(QStandardPaths.StandardLocation.GenericConfigLocation)


def default_state_dir() -> Path:
    """Where ``logs/`` lives: the checkout root, else the per-user data directory."""
    if running_from_checkout():
        return PROJECT_ROOT
    return _user_dir(QStandardPaths.StandardLocation.GenericDataLocation)


def resolve_settings_path(args_settings: Optional[str]) -> Path:
    if args_settings:
        return Path(args_settings).expanduser().resolve()
    env_override = os.getenv(SETTINGS_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    return (default_config_dir() / SETTINGS_FILENAME).resolve()


def build_controller(heap: DemoHeap, settings: ViewSettings, widget_ref: list) -> ListViewController:
    """Wire the demo heap into a controller; the update signal re-parses on the next event loop turn."""

    def _signal_update() -> None:
        def _refresh() -> None:
            widget = widget_ref[0] if widget_ref else None
            if widget is not None:
                widget.refresh(heap.boxes())
            else:
                controller.update_objects(heap.boxes())

        QTimer.singleShot(0, _refresh)

    controller = ListViewController(
        heap.parse_boxes,
        heap.evaluate,
        _signal_update,
        settings=settings,
    )
    controller.update_objects(heap.boxes())
    return controller


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Heap list view")
    parser.add_argument("--settings", help="Path to heap_view_settings.json")
    parser.add_argument("--export", help="Render the demo heap to an .svg or .png file and exit")
    parser.add_argument("--width", type=int, help="Canvas width override")
    parser.add_argument("--height", type=int, help="Canvas height override")
    args = parser.parse_args(argv)

    settings_path = resolve_settings_path(args.settings)
    settings = load_view_settings(settings_path)
    if args.width:
        settings.window_width = max(100, args.width)
    if args.height:
        settings.window_height = max(100, args.height)

    dev_mode = is_dev_build()
    level, source = resolve_log_level(dev_mode)
    configure_client_logging(default_state_dir(), settings.log_retention, level)
    apply_log_level_hint(level, source=source)
    if not dev_mode:
        _CLIENT_LOGGER.debug("Release build; export %s=1 for debug logging.", DEV_MODE_ENV_VAR)
    _CLIENT_LOGGER.info("Starting heap view %s (pid=%s)", __version__, os.getpid())
    _CLIENT_LOGGER.debug(
        "Loaded settings from %s: font=%s %.1fpx window=%dx%d",
        settings_path,
        settings.font_family,
        settings.font_size,
        settings.window_width,
        settings.window_height,
    )

    app = QApplication(sys.argv if argv is None else [sys.argv[0], *argv])
    heap = build_demo_heap()
    widget_ref: list = []
    controller = build_controller(heap, settings, widget_ref)

    if args.export:
        export_path = Path(args.export).expanduser().resolve()
        try:
            export_frame(controller, export_path, settings.window_width, settings.window_height)
        except (OSError, ValueError) as exc:
            _CLIENT_LOGGER.error("Export failed: %s", exc)
            return 1
        return 0

    widget = HeapListWidget(controller)
    widget_ref.append(widget)
    widget.setWindowTitle("Heap list view")
    widget.show()

    exit_code = app.exec()
    _CLIENT_LOGGER.info("Heap view exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
