"""
Playback clock for the test video.

Tracks the media position of a (virtual) player from wall-clock time, so the
sampler can grab whatever frame the viewer is seeing.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class PlaybackClock:
    """
    Wall-clock driven media position with pause/resume and looping.

    Example:
        clock = PlaybackClock(duration_ms=source.duration_ms, loop=True)
        clock.start()
        frame = source.read_at(clock.position_ms())
    """

    def __init__(
        self,
        duration_ms: float,
        loop: bool = True,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        self.duration_ms = max(float(duration_ms), 0.0)
        self.loop = loop
        self._time_fn = time_fn
        self._lock = threading.Lock()
        self._elapsed_ms = 0.0
        self._started_at: Optional[float] = None

    @property
    def is_playing(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Start (or resume) playback. No-op if already playing."""
        with self._lock:
            if self._started_at is None:
                self._started_at = self._time_fn()

    resume = start

    def pause(self) -> None:
        with self._lock:
            if self._started_at is not None:
                self._elapsed_ms += (self._time_fn() - self._started_at) * 1000.0
                self._started_at = None

    def reset(self) -> None:
        """Rewind to 0, keeping the play/pause state."""
        with self._lock:
            self._elapsed_ms = 0.0
            if self._started_at is not None:
                self._started_at = self._time_fn()

    def position_ms(self) -> float:
        with self._lock:
            elapsed = self._elapsed_ms
            if self._started_at is not None:
                elapsed += (self._time_fn() - self._started_at) * 1000.0

        if self.duration_ms <= 0:
            return elapsed
        if self.loop:
            return elapsed % self.duration_ms
        return min(elapsed, self.duration_ms)
