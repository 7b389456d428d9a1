"""Logging setup."""

import logging
from pathlib import Path
from typing import Optional

_HANDLER_TAG = "_playground_handler"
DEFAULT_LOG_DIR = Path.home() / ".cache" / "runtime-playground"


def setup_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> Path:
    """Setup logging configuration, returning the log file path.

    Calling this again replaces the handlers it installed before instead of
    stacking new ones.
    """
    log_dir = Path(log_dir or DEFAULT_LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "playground.log"

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    # File handler
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(file_formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    return log_path
