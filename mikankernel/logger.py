"""A level-filtered kernel logger writing to a text sink."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable


class LogLevel(IntEnum):
    """Log priorities; smaller is more important."""

    ERROR = 3
    WARN = 4
    INFO = 6
    DEBUG = 7


class Logger:
    """Formats messages printf-style and passes those within the threshold to sink."""

    def __init__(self, sink: Callable[[str], object], level: LogLevel = LogLevel.WARN) -> None:
        self._sink = sink
        self.level = level

    def set_level(self, level: LogLevel) -> None:
        """Change the threshold; messages above it are dropped."""
        self.level = level

    def log(self, level: LogLevel, fmt: str, *args: object) -> int:
        """Log a message; return the number of characters written, 0 if dropped."""
        if level > self.level:
            return 0
        message = fmt % args if args else fmt
        self._sink(message)
        return len(message)