"""
Logging Configuration for the Chunking Service

Library modules only ever call logging.getLogger(__name__), which places
them below the "smart_chunking" logger. Entry points (the CLI script and
the HTTP service) call configure_logging(config) once at startup; the
level and optional log file come from ChunkingServiceConfig, i.e. from
CHUNKING_LOG_LEVEL and CHUNKING_LOG_FILE.

Usage:
    config = ChunkingServiceConfig.from_env()
    configure_logging(config)
    get_logger("scripts.chunk_file").info("ready")
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigurationError

ROOT_LOGGER_NAME = "smart_chunking"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str]) -> int:
    """
    Turn a level name ("debug", "INFO") or number into a logging level.

    Raises:
        ConfigurationError: If the name is not a known level.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level {level!r}", option="log_level")
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling this again replaces (and closes) the handlers installed by a
    previous call, so repeated startup in tests does not duplicate output.

    Args:
        level: Level name or number
        log_file: Optional log file; missing parent directories are created
        format_string: Optional custom format string

    Returns:
        The "smart_chunking" logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = logging.Formatter(format_string or LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def configure_logging(config) -> logging.Logger:
    """Set up logging from a ChunkingServiceConfig (log_level, log_file)."""
    return setup_logging(level=config.log_level, log_file=config.log_file)


def get_logger(name: str) -> logging.Logger:
    """Logger for an entry-point component, e.g. "scripts.chunk_file"."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
