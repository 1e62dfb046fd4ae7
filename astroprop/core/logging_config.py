"""
Logging configuration.

All modules log through ``logging.getLogger(__name__)``, so their
records reach the ``astroprop`` namespace logger configured here.
Nothing is configured on import: a propagation run calls
``configure_logging`` with its ``SimulationConfig`` (or
``setup_logging`` directly) once before running candidates.

Per-candidate events (guards, detections, accepted SDE steps at the
minimum step size) are logged at DEBUG, run summaries at INFO, and
numerical failures that deactivate a candidate at WARNING.
"""

import logging
import sys
from typing import Optional, Union

from .config import SimulationConfig

#: Name of the package logger.
LOGGER_NAME = "astroprop"
#: Record layout: wall clock, emitting module, level, message.
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"setup_logging: unknown log level '{level}'")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console and optional file handlers to the package logger.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Level number or name such as ``"DEBUG"``.
        log_file: Path of a log file, truncated on open.

    Returns:
        The ``astroprop`` logger.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging to stdout{' and ' + log_file if log_file else ''} at {logging.getLevelName(level)}")
    return logger


def configure_logging(config: SimulationConfig) -> logging.Logger:
    """Apply ``config.log_level`` and ``config.log_file``."""
    return setup_logging(config.log_level, config.log_file)
