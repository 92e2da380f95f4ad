"""
Logging configuration for Noder Core
Every module logs through a "noder_core.<module>" logger with one stdout handler
"""
import logging
import sys
from typing import Optional, Union

ROOT_LOGGER = "noder_core"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: Union[int, str, None] = None) -> int:
    """
    Turn a level name or number into a logging level

    Args:
        level: logging constant, level name ("warning", "DEBUG"), or None to
            read Config.LOG_LEVEL / Config.DEBUG

    Returns:
        Numeric log level

    Raises:
        ValueError: If a level name is not known to logging
    """
    if isinstance(level, int):
        return level

    if level is None:
        from ..config import Config
        if not Config.LOG_LEVEL:
            return logging.DEBUG if Config.DEBUG else logging.INFO
        level = Config.LOG_LEVEL

    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    return numeric


def setup_logger(
    name: str = ROOT_LOGGER,
    level: Union[int, str, None] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with consistent formatting

    Args:
        name: Logger name (default: "noder_core")
        level: Log level or level name (default: from Config)
        format_string: Custom format string (optional)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured
    if logger.handlers:
        return logger

    numeric_level = resolve_level(level)
    logger.setLevel(numeric_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logger.addHandler(handler)

    # Keep engine logs out of host applications' root handlers
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get or create the logger for a module

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger named "noder_core.<last dotted part>"
    """
    return setup_logger(f"{ROOT_LOGGER}.{name.rsplit('.', 1)[-1]}")


def set_log_level(level: Union[int, str]) -> None:
    """
    Change the level of every Noder Core logger created so far

    Args:
        level: New log level (e.g., logging.WARNING or "warning")
    """
    numeric_level = resolve_level(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not isinstance(logger, logging.Logger):
            continue
        if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
            logger.setLevel(numeric_level)
            for handler in logger.handlers:
                handler.setLevel(numeric_level)
