"""Logging setup for the API process."""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _log_dir() -> Path:
    return Path(os.getenv("LOG_DIR") or Path(__file__).resolve().parents[2] / "logs")


def setup_logging() -> None:
    """Attach console and file handlers to the `app` logger (idempotent)."""
    logger = logging.getLogger("app")
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logger.setLevel(level)

    log_dir = _log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = (log_dir / "listing_assistant.log").resolve()

    has_console = False
    has_file = False
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            if getattr(handler, "baseFilename", "") == str(log_path):
                has_file = True
        elif isinstance(handler, logging.StreamHandler):
            has_console = True

    formatter = logging.Formatter(LOG_FORMAT)
    if not has_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    if not has_file:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
