"""Session-based instrumentation profilers and a scope timer that feeds them."""

from __future__ import annotations

import abc
import json
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

from mauengine import services
from mauengine.asserts import me_check
from mauengine.logger import NUM_FRAMES_TO_PROFILE, LogCategory, LogPriority

DEFAULT_RESERVE_SIZE = 100_000


@dataclass(frozen=True)
class ProfileResult:
    """One timed region: start and end in microseconds."""

    name: str
    start: int
    end: int
    thread_id: int = field(default_factory=threading.get_ident)


def fix_file_path(filepath: str | Path) -> None:
    """Create the parent directory of ``filepath`` and delete any existing file there."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()
        services.get_logger().log(
            LogPriority.WARN, LogCategory.CORE, "Existing file deleted: {}", str(filepath)
        )


class Profiler(abc.ABC):
    """Base profiler: named sessions plus frame-counted captures triggered by ``start``."""

    def __init__(self) -> None:
        self.file_name = ""
        self._profiled_frames = 0
        self._is_profiling = False
        self._num_executed_profiles = 0

    @property
    def is_profiling(self) -> bool:
        return self._is_profiling

    def begin_session(
        self, name: str, filepath: str | Path, reserve_size: int = DEFAULT_RESERVE_SIZE
    ) -> None:
        """Open a session named ``name`` whose output goes to ``filepath``."""
        self.file_name = str(filepath)
        self._begin_session_internal(name, reserve_size)

    def start(self, path: str | Path) -> None:
        """Begin a capture of the next frames, numbered after ``path``."""
        logger = services.get_logger()
        if self._is_profiling:
            logger.log(LogPriority.INFO, LogCategory.CORE, "Already profiling {}", self.file_name)
            return
        self.file_name = f"{path}{self._num_executed_profiles}"
        logger.log(LogPriority.INFO, LogCategory.CORE, "Beginning profile session {}", self.file_name)
        self._begin_session_internal(self.file_name)
        self._is_profiling = True

    def update(self) -> None:
        """Count a frame; end the capture once enough frames have been profiled."""
        if self._is_profiling:
            self._profiled_frames += 1
        if self._profiled_frames == NUM_FRAMES_TO_PROFILE:
            self._num_executed_profiles += 1
            self._profiled_frames = 0
            self._is_profiling = False
            self.end_session()
            services.get_logger().log(
                LogPriority.INFO, LogCategory.CORE, "Ending profile session {}", self.file_name
            )

    @abc.abstractmethod
    def _begin_session_internal(self, name: str, reserve_size: int = DEFAULT_RESERVE_SIZE) -> None:
        """Open the output for a new session."""

    @abc.abstractmethod
    def write_profile(self, result: ProfileResult, is_function: bool) -> None:
        """Record a timed region."""

    @abc.abstractmethod
    def write_named(self, name: str) -> None:
        """Record a named event."""

    @abc.abstractmethod
    def end_session(self) -> None:
        """Close the current session, if any."""


class GoogleProfiler(Profiler):
    """Writes sessions as Chrome trace-event JSON to ``<file>.json``."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self._session: str | None = None
        self._buffer = ""
        self._flush_threshold = 0
        self._output: IO[str] | None = None

    @property
    def session_name(self) -> str | None:
        return self._session

    def __del__(self) -> None:
        try:
            self.end_session()
        except Exception:
            pass

    def _begin_session_internal(self, name: str, reserve_size: int = DEFAULT_RESERVE_SIZE) -> None:
        self.end_session()
        self.file_name += ".json"
        fix_file_path(self.file_name)
        try:
            self._output = open(self.file_name, "w", encoding="utf-8")
        except OSError:
            self._output = None
            services.get_logger().log(
                LogPriority.ERROR, LogCategory.CORE, "Failed to open the file: {}", self.file_name
            )
            return
        self._buffer = ""
        self._flush_threshold = int(0.9 * reserve_size)
        self._output.write('{"otherData": {},"traceEvents":[{}')
        self._output.flush()
        self._session = name

    def write_profile(self, result: ProfileResult, is_function: bool) -> None:
        """Append a complete ("X") event for ``result`` to the session."""
        if self._session is None or self._output is None:
            return
        event = (
            ',{"cat":"' + ("function" if is_function else "scope") + '",'
            f'"dur":{result.end - result.start},'
            f'"name":{json.dumps(result.name)},'
            '"ph":"X","pid":0,'
            f'"tid":{result.thread_id},'
            f'"ts":{result.start}'
            "}"
        )
        with self._lock:
            self._buffer += event
            if len(self._buffer) >= self._flush_threshold:
                self._output.write(self._buffer)
                self._output.flush()
                self._buffer = ""

    def write_named(self, name: str) -> None:
        """Not supported by this profiler: logs an error and fails a check."""
        services.get_logger().log(
            LogPriority.ERROR, LogCategory.CORE, "Incorrect profiler function for google profiler used."
        )
        me_check(False, category=LogCategory.CORE)

    def end_session(self) -> None:
        """Finish the JSON document and close the file."""
        if self._session is None:
            return
        with self._lock:
            self._buffer += "]}"
            if self._output is not None:
                self._output.write(self._buffer)
                self._output.close()
                self._output = None
            self._buffer = ""
            self._session = None


class NullProfiler(Profiler):
    """Profiler that records nothing."""

    def _begin_session_internal(self, name: str, reserve_size: int = DEFAULT_RESERVE_SIZE) -> None:
        pass

    def write_profile(self, result: ProfileResult, is_function: bool) -> None:
        pass

    def write_named(self, name: str) -> None:
        pass

    def end_session(self) -> None:
        pass


def _now_us() -> int:
    return time.perf_counter_ns() // 1000


class InstrumentorTimer:
    """Times a region and reports it to the active profiler when stopped."""

    def __init__(self, name: str, is_function: bool = False) -> None:
        self.name = name
        self.is_function = is_function
        self._start = _now_us()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Report the elapsed region to the profiler."""
        end = _now_us()
        self._stopped = True
        services.get_profiler().write_profile(
            ProfileResult(self.name, self._start, end, threading.get_ident()), self.is_function
        )

    def __enter__(self) -> InstrumentorTimer:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if not self._stopped:
            self.stop()