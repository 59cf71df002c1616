"""Logging setup for ingestion runs.

Console output always works; the file handler under ``logs_dir`` is added
when the directory is writable and skipped with a warning otherwise.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .config import IngestConfig


SYSTEM_FMT = "[%(asctime)s] [%(levelname)s] %(message)s"


def _ensure_logs_dir(config: IngestConfig) -> Path:
    logs_dir = Path(config.logging.logs_dir).expanduser().resolve()
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _safe_add_file_handler(logger: logging.Logger, path: Path, fmt: str, level: int) -> None:
    try:
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(fmt))
        logger.addHandler(fh)
    except OSError as exc:  # pragma: no cover - depends on FS permissions
        logger.warning("[WARNING] Failed to attach file handler %s (%s)", str(path), exc)


def get_logger(name: str, config: IngestConfig | None = None) -> logging.Logger:
    """Return a logger with console + file handlers.

    - File: ``logging.file_name`` under ``logging.logs_dir``
    - Console: same format
    - Level: from config, INFO by default
    """
    config = config or IngestConfig()
    level = getattr(logging, config.logging.level, logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Reset handlers to avoid duplication across repeated initializations
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(SYSTEM_FMT))
    logger.addHandler(sh)

    try:
        logs_dir = _ensure_logs_dir(config)
    except OSError as exc:  # pragma: no cover - depends on FS permissions
        logger.warning("[WARNING] Logs directory unavailable (%s); console logging only", exc)
        return logger
    _safe_add_file_handler(logger, logs_dir / config.logging.file_name, SYSTEM_FMT, level)
    return logger


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_error(logger: logging.Logger, message: str):
    logger.error("[ERROR] %s", message)
