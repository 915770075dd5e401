"""Logging helpers for the heap list view client."""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "HeapView.Client"
LOG_LEVEL_ENV_VAR = "HEAP_VIEW_LOG_LEVEL"
_LOG_DIR_NAME = "logs"
_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def resolve_logs_dir(root: Path, *, create: bool = True) -> Path:
    """Return ``<root>/logs``, creating it when possible."""
    logs_dir = root / _LOG_DIR_NAME
    if create:
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logging.getLogger(LOGGER_NAME).debug("Unable to create log directory %s", logs_dir)
    return logs_dir


def build_rotating_file_handler(path: Path, retention: int = 5, max_bytes: int = 512 * 1024) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=max(1, int(max_bytes)),
        backupCount=max(1, int(retention)),
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    return handler


def parse_log_level(value: Union[str, int, None]) -> Optional[int]:
    """Accept a numeric level or a level name such as ``debug``."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    token = str(value).strip()
    if not token:
        return None
    try:
        return int(token)
    except ValueError:
        pass
    level = getattr(logging, token.upper(), None)
    return level if isinstance(level, int) else None


def apply_log_level_hint(level: Optional[int], *, source: Optional[str] = None) -> None:
    """Force the client logger level; ``None`` leaves it unchanged."""
    if level is None:
        return
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.log(
        level if level >= logging.INFO else logging.INFO,
        "Heap view logger level forced to %s via %s",
        logging.getLevelName(level),
        source or "default",
    )


def resolve_log_level(dev_mode: bool) -> tuple[int, str]:
    env_level = parse_log_level(os.getenv(LOG_LEVEL_ENV_VAR))
    if env_level is not None:
        return env_level, "env"
    if dev_mode:
        return logging.DEBUG, "dev-mode"
    return logging.INFO, "default"


def configure_client_logging(root: Path, retention: int, level: int) -> Optional[RotatingFileHandler]:
    """Attach a rotating file handler to the client logger (idempotent per path)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    log_path = resolve_logs_dir(root) / "heap_view.log"
    for existing in logger.handlers:
        if isinstance(existing, RotatingFileHandler) and Path(existing.baseFilename) == log_path.resolve():
            return existing
    try:
        handler = build_rotating_file_handler(log_path, retention=retention)
    except OSError as exc:
        logger.warning("File logging disabled; cannot open %s: %s", log_path, exc)
        return None
    logger.addHandler(handler)
    return handler
