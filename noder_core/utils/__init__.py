"""
Shared utilities for Noder Core
"""
from .logger import get_logger, setup_logger, set_log_level, resolve_level

__all__ = ["get_logger", "setup_logger", "set_log_level", "resolve_level"]
