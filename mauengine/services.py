"""Process-wide access to the active logger and profiler, plus a per-class singleton base."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, TypeVar

from mauengine.logger import Logger, NullLogger

if TYPE_CHECKING:
    from mauengine.profiling import Profiler

_T = TypeVar("_T", bound="Singleton")


class Singleton:
    """Base class whose subclasses each share one lazily created instance."""

    _instances: dict[type, Any] = {}
    _instances_lock = threading.RLock()

    @classmethod
    def get_instance(cls: type[_T]) -> _T:
        """The one instance of this class, created on first use."""
        with Singleton._instances_lock:
            instance = Singleton._instances.get(cls)
            if instance is None:
                instance = cls()
                Singleton._instances[cls] = instance
            return instance

    def __copy__(self) -> Any:
        raise TypeError(f"{type(self).__name__} is a singleton and cannot be copied")

    def __deepcopy__(self, memo: Any) -> Any:
        raise TypeError(f"{type(self).__name__} is a singleton and cannot be copied")


_logger: Logger = NullLogger()
_profiler: Profiler | None = None


def get_logger() -> Logger:
    """The logger currently in use."""
    return _logger


def register_logger(logger: Logger | None) -> None:
    """Install ``logger``; ``None`` installs a logger that discards everything."""
    global _logger
    _logger = logger if logger is not None else NullLogger()


def _null_profiler() -> Profiler:
    from mauengine.profiling import NullProfiler

    return NullProfiler()


def get_profiler() -> Profiler:
    """The profiler currently in use."""
    global _profiler
    if _profiler is None:
        _profiler = _null_profiler()
    return _profiler


def register_profiler(profiler: Profiler | None) -> None:
    """Install ``profiler``; ``None`` installs a profiler that records nothing."""
    global _profiler
    _profiler = profiler if profiler is not None else _null_profiler()