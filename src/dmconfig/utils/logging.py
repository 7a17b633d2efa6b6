"""Logging setup for the configuration backend."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
ISO_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name ("info", "WARNING") or number into a logging level.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logger(
    name: str = "dmconfig",
    log_file: str = "./logs/dm-config.log",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 3,
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """Attach a rotating file handler and a console handler to the root
    "dmconfig" logger; component loggers (dmconfig.config_service,
    dmconfig.network, ...) propagate to it.

    Calling again only updates the level, so app factories used by tests
    do not stack handlers.

    Args:
        name: Logger name
        log_file: Path to log file, parent directories are created
        max_bytes: Size at which the file rotates
        backup_count: Rotated files kept
        level: Level name or number

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a known level name
    """
    numeric_level = resolve_level(level)

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)
    if logger.handlers:
        return logger

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=ISO_DATEFMT)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
