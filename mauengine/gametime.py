"""Frame timing with a fixed-timestep lag accumulator."""

from __future__ import annotations

import time
from typing import Callable

from mauengine.services import Singleton

MS_PER_FRAME = 16.7
MS_FIXED_TIME_STEP = 20.0


class GameTime(Singleton):
    """Tracks the duration of each frame and the lag owed to fixed updates.

    ``clock`` returns the current time in seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._last_time = clock()
        self._ms_per_frame = MS_PER_FRAME
        self._ms_fixed_time_step = MS_FIXED_TIME_STEP
        self._elapsed_sec = 0.0
        self._ms_lag = 0.0

    @property
    def elapsed_sec(self) -> float:
        """Duration of the last frame in seconds."""
        return self._elapsed_sec

    @property
    def fixed_time_step_sec(self) -> float:
        """Duration of one fixed update in seconds."""
        return self._ms_fixed_time_step / 1000.0

    @property
    def lag_ms(self) -> float:
        """Accumulated time not yet consumed by fixed updates, in milliseconds."""
        return self._ms_lag

    def update(self) -> None:
        """Measure the frame that just ended and add it to the lag."""
        current = self._clock()
        self._elapsed_sec = current - self._last_time
        self._ms_lag += self._elapsed_sec * 1000.0
        self._last_time = self._clock()

    def is_lag(self) -> bool:
        """Whether at least one fixed update is owed."""
        return self._ms_lag >= self._ms_fixed_time_step

    def process_lag(self) -> None:
        """Consume one fixed update's worth of lag."""
        self._ms_lag -= self._ms_fixed_time_step

    def sleep_time(self) -> float:
        """Seconds left before the frame budget is spent; negative when over budget."""
        budget = int(self._ms_per_frame) / 1000.0
        return self._last_time + budget - self._clock()