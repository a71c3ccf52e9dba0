"""
Fixed-rate frame sampler.

Every interval, the sampler grabs the frame at the current playback position,
classifies it and publishes the result. Ticks run on one dedicated thread, so
they never overlap. A tick is handed the sampler state explicitly; when the
state is DISABLED the tick does nothing.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from inference.predictor import RoadTypePredictor
from models.prediction import Prediction
from models.status import PerformanceSnapshot, TickOutcome
from observation.base import ObservationSource
from observation.playback import PlaybackClock
from ops.perf import PerformanceMonitor
from runtime.state import ResultState


class SamplerState(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


@dataclass
class SamplerConfig:
    """
    Attributes:
        interval_ms: Period between tick starts.
        initial_delay_ms: Delay before the first tick after start().
        join_timeout_s: How long stop() waits for an in-flight tick.
    """
    interval_ms: int = 500
    initial_delay_ms: int = 0
    join_timeout_s: float = 5.0


class FrameSampler:
    """
    Periodic sample -> classify -> publish loop.

    Example:
        sampler = FrameSampler(source, clock, predictor, result_state, SamplerConfig())
        sampler.start()
        ...
        sampler.stop()
    """

    def __init__(
        self,
        source: ObservationSource,
        clock: PlaybackClock,
        predictor: RoadTypePredictor,
        result_state: ResultState,
        config: SamplerConfig,
        perf: Optional[PerformanceMonitor] = None,
    ):
        self.source = source
        self.clock = clock
        self.predictor = predictor
        self.result_state = result_state
        self.config = config
        self.perf = perf
        self._state = SamplerState.DISABLED
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()
        self._callbacks: List[Callable[[Prediction], None]] = []

    @property
    def state(self) -> SamplerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SamplerState.ENABLED

    def add_callback(self, callback: Callable[[Prediction], None]) -> None:
        """Register a function called with every successful prediction."""
        self._callbacks.append(callback)

    def tick(self, state: SamplerState, cancel: Optional[threading.Event] = None) -> TickOutcome:
        """
        Run one sampling step synchronously.

        A missing frame leaves the published label unchanged. Any exception
        while decoding, preprocessing or running the model publishes the
        unknown label; neither case stops the sampler. If `cancel` is set
        before the result is published, the result is dropped.
        """
        if state != SamplerState.ENABLED:
            self.result_state.record(TickOutcome.SKIPPED)
            return TickOutcome.SKIPPED

        position_ms = self.clock.position_ms()
        try:
            frame_data = self.source.read_at(position_ms)
            if frame_data is None:
                logging.warning(f"No frame at {position_ms:.0f}ms, keeping previous label")
                self.result_state.record(TickOutcome.NO_FRAME)
                return TickOutcome.NO_FRAME

            prediction = self.predictor.predict(frame_data)
            if self.perf is not None:
                performance = self.perf.snapshot(prediction.inference_ms)
            else:
                performance = PerformanceSnapshot(inference_ms=prediction.inference_ms)
        except Exception as e:
            logging.exception(f"Inference failed at {position_ms:.0f}ms: {e}")
            if not self._commit(cancel, self.result_state.publish_failure):
                return TickOutcome.SKIPPED
            return TickOutcome.FAILED

        if not self._commit(cancel, lambda: self.result_state.publish(prediction, performance)):
            return TickOutcome.SKIPPED
        logging.info(
            f"Road type: {prediction.label.value} at {position_ms:.0f}ms "
            f"({prediction.inference_ms:.1f}ms)"
        )

        for callback in self._callbacks:
            try:
                callback(prediction)
            except Exception as e:
                logging.warning(f"Callback error: {e}")

        return TickOutcome.CLASSIFIED

    def _commit(self, cancel: Optional[threading.Event], publish: Callable[[], None]) -> bool:
        # Serialized with stop() so a late tick cannot overwrite the reset label.
        with self._lifecycle_lock:
            if cancel is not None and cancel.is_set():
                logging.debug("Sampler stopped during tick, discarding result")
                self.result_state.record(TickOutcome.SKIPPED)
                return False
            publish()
        return True

    def start(self) -> None:
        """Start playback and the periodic sampling thread."""
        with self._lifecycle_lock:
            if self._state == SamplerState.ENABLED:
                return
            self._state = SamplerState.ENABLED
            self._stop_event = threading.Event()
            self.clock.start()
            self.result_state.set_running(True)
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="frame-sampler",
                daemon=True,
            )
            self._thread.start()
        logging.info(f"Sampler started: interval={self.config.interval_ms}ms")

    def stop(self) -> None:
        """
        Stop issuing ticks, pause playback and reset the label.

        A tick already in progress runs to completion, but its result is
        dropped. If start() is called while this waits for the thread, the
        new run is left untouched.
        """
        with self._lifecycle_lock:
            if self._state == SamplerState.DISABLED:
                return
            self._state = SamplerState.DISABLED
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.config.join_timeout_s)
            if thread.is_alive():
                logging.warning("Sampler thread did not finish its tick before the join timeout")

        with self._lifecycle_lock:
            if self._state != SamplerState.DISABLED:
                logging.info("Sampler restarted while stopping")
                return
            self.clock.pause()
            self.result_state.set_running(False)
            self.result_state.reset_label()
        logging.info("Sampler stopped")

    def toggle(self) -> bool:
        """Start if stopped, stop if running. Returns the new running state."""
        if self.is_running:
            self.stop()
        else:
            self.start()
        return self.is_running

    def _run(self, stop_event: threading.Event) -> None:
        interval = self.config.interval_ms / 1000.0
        next_deadline = time.monotonic() + self.config.initial_delay_ms / 1000.0

        while not stop_event.is_set():
            wait = next_deadline - time.monotonic()
            if wait > 0 and stop_event.wait(wait):
                break

            self.tick(self._state, stop_event)

            next_deadline += interval
            now = time.monotonic()
            if next_deadline < now:
                missed = int((now - next_deadline) // interval) + 1
                next_deadline += missed * interval
                logging.debug(f"Sampler overran, skipping {missed} tick(s)")
