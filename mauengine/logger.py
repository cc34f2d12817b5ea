"""Prioritised, categorised logging to the console, to a rotating file, or nowhere."""

from __future__ import annotations

import abc
import sys
import threading
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import IO, Any, BinaryIO

# Terminal colour codes used by the console logger.
LOG_COLOR_RESET = "\033[0m"
LOG_COLOR_CATEGORY = "\033[1;34m"
LOG_COLOR_TRACE = "\033[1;37m"
LOG_COLOR_INFO = "\033[1;32m"
LOG_COLOR_DEBUG = "\033[1;36m"
LOG_COLOR_WARNING = "\033[1;33m"
LOG_COLOR_ERROR = "\033[1;31m"
LOG_COLOR_FATAL = "\033[1;31m"

# Engine-wide settings.
NUM_FRAMES_TO_PROFILE = 5
LIMIT_FPS = True
LOG_FPS = True

MAX_FILE_SIZE_BEFORE_ROTATE = 5_000


class LogPriority(IntEnum):
    """Severity of a log message; messages below the logger's level are dropped."""

    TRACE = 0
    INFO = 1
    DEBUG = 2
    WARN = 3
    ERROR = 4
    FATAL = 5


class LogCategory(Enum):
    """The engine subsystem a message comes from."""

    CORE = 0
    ENGINE = 1
    RENDERER = 2
    GAME = 3


_PRIORITY_NAMES = {
    LogPriority.TRACE: "Trace",
    LogPriority.INFO: "Info",
    LogPriority.DEBUG: "Debug",
    LogPriority.WARN: "Warn",
    LogPriority.ERROR: "Error",
    LogPriority.FATAL: "Fatal",
}

_PRIORITY_COLOURS = {
    LogPriority.TRACE: LOG_COLOR_TRACE,
    LogPriority.INFO: LOG_COLOR_INFO,
    LogPriority.DEBUG: LOG_COLOR_DEBUG,
    LogPriority.WARN: LOG_COLOR_WARNING,
    LogPriority.ERROR: LOG_COLOR_ERROR,
    LogPriority.FATAL: LOG_COLOR_FATAL,
}

_CATEGORY_NAMES = {
    LogCategory.CORE: "Core",
    LogCategory.ENGINE: "Engine",
    LogCategory.RENDERER: "Renderer",
    LogCategory.GAME: "Game",
}


def priority_to_string(priority: Any) -> str:
    """Human-readable name of a priority, or "Unknown"."""
    return _PRIORITY_NAMES.get(priority, "Unknown")


def priority_to_colour(priority: Any) -> str:
    """Terminal colour for a priority, or the reset code when unknown."""
    return _PRIORITY_COLOURS.get(priority, LOG_COLOR_RESET)


def category_to_string(category: Any) -> str:
    """Human-readable name of a category, or "Unknown"."""
    return _CATEGORY_NAMES.get(category, "Unknown")


class Logger(abc.ABC):
    """Base logger: filters by priority, formats and serialises output."""

    def __init__(self) -> None:
        self._priority = LogPriority.TRACE
        self._lock = threading.Lock()

    @property
    def priority_level(self) -> LogPriority:
        return self._priority

    def log(self, priority: LogPriority, category: LogCategory, message: str, *args: Any) -> None:
        """Format ``message`` with ``args`` ("{}" placeholders) and emit it."""
        if priority < self._priority:
            return
        text = message.format(*args)
        with self._lock:
            self._log_internal(priority, category, text)

    def set_priority_level(self, priority: LogPriority) -> None:
        """Drop every later message whose priority is lower than ``priority``."""
        self._priority = LogPriority(priority)

    @abc.abstractmethod
    def _log_internal(self, priority: LogPriority, category: LogCategory, message: str) -> None:
        """Write an already formatted message."""


class ConsoleLogger(Logger):
    """Writes coloured messages to a text stream (standard output by default)."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__()
        self._stream = stream

    def _log_internal(self, priority: LogPriority, category: LogCategory, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(
            f"{LOG_COLOR_CATEGORY}[{category_to_string(category)}] "
            f"{priority_to_colour(priority)}{message}{LOG_COLOR_RESET} \n"
        )


class FileLogger(Logger):
    """Appends timestamped messages to a file, rotating it to ``<path>.1`` when it grows."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)
        self._file: BinaryIO | None = None
        self._open_log_file()

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        """Close the underlying file; later messages are discarded."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> FileLogger:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass

    def _log_internal(self, priority: LogPriority, category: LogCategory, message: str) -> None:
        if self._file is None:
            return
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = (
            f"[{timestamp}] [{priority_to_string(priority)}] "
            f"[{category_to_string(category)}] {message}\n"
        )
        self._file.write(line.encode("utf-8"))
        self._file.flush()
        if self._file.tell() >= MAX_FILE_SIZE_BEFORE_ROTATE:
            self._rotate_file()

    def _open_log_file(self) -> None:
        try:
            self._file = open(self._path, "ab")
        except OSError:
            self._file = None
            print(f"Error opening log file: {self._path}", file=sys.stderr)

    def _rotate_file(self) -> None:
        self.close()
        backup = Path(f"{self._path}.1")
        backup.unlink(missing_ok=True)
        self._path.rename(backup)
        self._open_log_file()


class NullLogger(Logger):
    """Logger that discards everything."""

    def _log_internal(self, priority: LogPriority, category: LogCategory, message: str) -> None:
        pass


def create_console_logger() -> Logger:
    """A logger writing to standard output."""
    return ConsoleLogger()


def create_file_logger(path: str | Path) -> Logger:
    """A logger appending to the file at ``path``."""
    return FileLogger(path)