"""Logging utilities with timing and frame tracking."""

from __future__ import annotations
import os
import sys
import time
from typing import Optional, TextIO


class Logger:
    """Viewer logger with timestamps and frame counts."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self._stream = stream
        self.enabled: bool = os.environ.get("LIGHTBOX_QUIET", "") not in ("1", "true", "yes")

    @property
    def frame(self) -> int:
        """Current frame number."""
        return self._frame

    @frame.setter
    def frame(self, value: int) -> None:
        self._frame = value

    def increment_frame(self) -> None:
        """Increment frame counter."""
        self._frame += 1

    @property
    def elapsed(self) -> float:
        """Seconds since logger was created."""
        return time.perf_counter() - self._start_time

    def log(self, msg: str) -> None:
        """Log a message with timestamp and frame number."""
        if not self.enabled:
            return
        line = f"[{self.elapsed:7.3f}s F{self._frame:06d}] {msg}\n"
        stream = self._stream or sys.stdout
        try:
            stream.write(line)
            stream.flush()
        except (OSError, ValueError):
            try:
                sys.stderr.write(line)
                sys.stderr.flush()
            except (OSError, ValueError):
                pass

    def __call__(self, msg: str) -> None:
        """Shorthand for log()."""
        self.log(msg)


# Global logger instance
_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def set_logger(logger: Logger) -> None:
    """Replace the global logger (e.g. to capture output)."""
    global _logger
    _logger = logger


def log(msg: str) -> None:
    """Log a message using the global logger."""
    get_logger().log(msg)


def increment_frame() -> None:
    """Increment frame counter."""
    get_logger().increment_frame()


# Time utilities
def now() -> float:
    """Get current time in seconds (high precision)."""
    return time.perf_counter()


def now_ms() -> float:
    """Get current time in milliseconds."""
    return time.perf_counter() * 1000.0
