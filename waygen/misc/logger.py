"""
Centralized logging utility for the waygen library.

Every component builds its own logger with `create_logger(verbose, name)`.
Lines look like:

    [waygen] [MarkerGenerator] [contract-1] Generated marker 'Camp' at 5.0000, 30.0000

INFO/DEBUG are printed only for verbose components; warnings and errors
always go to stderr. WAYGEN_LOG_LEVEL=DEBUG turns on debug output for
every verbose component.
"""

import os
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


# --- Default threshold for verbose components ---
try:
    DEFAULT_LEVEL = LogLevel[os.getenv('WAYGEN_LOG_LEVEL', 'INFO').upper()]
except KeyError:
    DEFAULT_LEVEL = LogLevel.INFO

_LEVEL_TAGS = {
    LogLevel.DEBUG: "DEBUG:",
    LogLevel.INFO: "",
    LogLevel.WARNING: "Warning:",
    LogLevel.ERROR: "ERROR:",
}


class WaygenLogger:
    """
    Print-based logger tagged with a component name and an optional context.

    Usage:
        logger = create_logger(verbose=True, name="MarkerGenerator").with_context("contract-1")
        logger.info("Created 4 markers")
        logger.warning("No valid point found near 0.0000, 0.0000")
    """

    def __init__(self, verbose: bool = True, name: Optional[str] = None,
                 min_level: LogLevel = LogLevel.INFO, context: Optional[str] = None):
        self.verbose = verbose
        self.name = name
        self.min_level = min_level
        self.context = context

    def with_context(self, context: str) -> "WaygenLogger":
        """Copy of this logger whose lines also carry `context` (e.g. a mission id)."""
        return WaygenLogger(self.verbose, self.name, self.min_level, context)

    def _prefix(self, level: LogLevel) -> str:
        parts = ["[waygen]"]
        if self.name:
            parts.append(f"[{self.name}]")
        if self.context:
            parts.append(f"[{self.context}]")
        if _LEVEL_TAGS[level]:
            parts.append(_LEVEL_TAGS[level])
        return " ".join(parts)

    def _emit(self, level: LogLevel, message: str):
        if level.value < LogLevel.WARNING.value:
            if not self.verbose or level.value < self.min_level.value:
                return
            print(f"{self._prefix(level)} {message}")
        else:
            print(f"{self._prefix(level)} {message}", file=sys.stderr)

    def debug(self, message: str):
        self._emit(LogLevel.DEBUG, message)

    def info(self, message: str):
        self._emit(LogLevel.INFO, message)

    def warning(self, message: str):
        """Always shown."""
        self._emit(LogLevel.WARNING, message)

    def error(self, message: str):
        """Always shown."""
        self._emit(LogLevel.ERROR, message)


def create_logger(verbose: bool = True, name: Optional[str] = None, debug: bool = False) -> WaygenLogger:
    """
    Factory function to create a logger instance.

    Args:
        verbose: If False, suppresses INFO and DEBUG messages
        name: Component name (e.g., "MarkerGenerator", "Environment")
        debug: Show DEBUG messages regardless of WAYGEN_LOG_LEVEL

    Returns:
        Configured WaygenLogger instance
    """
    min_level = LogLevel.DEBUG if debug else DEFAULT_LEVEL
    return WaygenLogger(verbose=verbose, name=name, min_level=min_level)
