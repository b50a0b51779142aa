"""Logging setup for the promptcraft package"""

import logging
from pathlib import Path

from promptcraft.models.config import LoggingConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "promptcraft"


def configure_logging(config: LoggingConfig, verbose: bool = False) -> logging.Logger:
    """Configure the package logger from config; verbose forces DEBUG"""
    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.DEBUG if verbose else getattr(logging, config.level)
    logger.setLevel(level)

    if config.log_file and not any(
        isinstance(h, logging.FileHandler) for h in logger.handlers
    ):
        log_path = Path(config.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    return logger
