"""
Tests for the fixed-rate frame sampler.
"""

import threading
import time
from unittest.mock import MagicMock

import numpy as np
import pytest

from conftest import FakeExecutor
from inference.predictor import RoadTypePredictor
from models.frame import FrameData
from models.prediction import RoadType
from models.status import PerformanceSnapshot, TickOutcome
from observation.playback import PlaybackClock
from pipeline.sampler import FrameSampler, SamplerConfig, SamplerState
from runtime.state import ResultState


class StubSource:
    """Returns a fixed frame, None, or raises, per call."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.positions = []

    def read_at(self, position_ms):
        self.positions.append(position_ms)
        result = self.results.pop(0) if self.results else np.zeros((360, 640, 3), dtype=np.uint8)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return None
        return FrameData.from_numpy(result, position_ms, len(self.positions), "stub")


@pytest.fixture
def result_state():
    return ResultState()


def _sampler(source, result_state, executor=None, perf=None, interval_ms=500, clock=None):
    return FrameSampler(
        source,
        clock or PlaybackClock(10000),
        RoadTypePredictor(executor or FakeExecutor()),
        result_state,
        SamplerConfig(interval_ms=interval_ms),
        perf=perf,
    )


class TestTick:
    def test_disabled_tick_does_nothing(self, result_state):
        source = StubSource()
        sampler = _sampler(source, result_state)

        outcome = sampler.tick(SamplerState.DISABLED)

        assert outcome == TickOutcome.SKIPPED
        assert source.positions == []
        assert result_state.label == RoadType.UNKNOWN

    def test_enabled_tick_publishes_prediction(self, result_state):
        sampler = _sampler(StubSource(), result_state)

        outcome = sampler.tick(SamplerState.ENABLED)

        assert outcome == TickOutcome.CLASSIFIED
        assert result_state.label == RoadType.CONCRETE
        snap = result_state.snapshot()
        assert snap["counters"]["classified"] == 1
        assert snap["counters"]["by_label"] == {"concrete": 1}
        assert snap["performance"]["inference_ms"] >= 0.0

    def test_reads_at_clock_position(self, result_state):
        clock = MagicMock()
        clock.position_ms.return_value = 4321.0
        source = StubSource()
        sampler = _sampler(source, result_state, clock=clock)

        sampler.tick(SamplerState.ENABLED)

        assert source.positions == [4321.0]

    def test_missing_frame_keeps_previous_label(self, result_state):
        source = StubSource([np.zeros((360, 360, 3), dtype=np.uint8), None])
        sampler = _sampler(source, result_state)

        assert sampler.tick(SamplerState.ENABLED) == TickOutcome.CLASSIFIED
        assert sampler.tick(SamplerState.ENABLED) == TickOutcome.NO_FRAME

        assert result_state.label == RoadType.CONCRETE
        assert result_state.snapshot()["counters"]["no_frame"] == 1

    def test_inference_error_publishes_unknown(self, result_state):
        executor = FakeExecutor()
        sampler = _sampler(StubSource(), result_state, executor=executor)
        sampler.tick(SamplerState.ENABLED)

        executor.error = RuntimeError("session crashed")
        outcome = sampler.tick(SamplerState.ENABLED)

        assert outcome == TickOutcome.FAILED
        assert result_state.label == RoadType.UNKNOWN
        assert result_state.snapshot()["last_outcome"] == "failed"

    def test_source_error_publishes_unknown(self, result_state):
        sampler = _sampler(StubSource([OSError("decoder gone")]), result_state)
        assert sampler.tick(SamplerState.ENABLED) == TickOutcome.FAILED
        assert result_state.label == RoadType.UNKNOWN

    def test_perf_monitor_used(self, result_state):
        perf = MagicMock()
        perf.snapshot.return_value = PerformanceSnapshot(inference_ms=3.0, cpu_pct=12.5)
        sampler = _sampler(StubSource(), result_state, perf=perf)

        sampler.tick(SamplerState.ENABLED)

        perf.snapshot.assert_called_once()
        assert result_state.snapshot()["performance"]["cpu_pct"] == 12.5

    def test_callbacks_receive_prediction(self, result_state):
        sampler = _sampler(StubSource(), result_state)
        received = []
        sampler.add_callback(received.append)
        sampler.add_callback(MagicMock(side_effect=ValueError("boom")))

        outcome = sampler.tick(SamplerState.ENABLED)

        assert outcome == TickOutcome.CLASSIFIED
        assert len(received) == 1
        assert received[0].label == RoadType.CONCRETE

    def test_result_dropped_when_cancelled_mid_tick(self, result_state):
        cancel = threading.Event()

        class StoppedDuringRun(FakeExecutor):
            def run(self, tensor):
                cancel.set()
                return super().run(tensor)

        sampler = _sampler(StubSource(), result_state, executor=StoppedDuringRun())

        outcome = sampler.tick(SamplerState.ENABLED, cancel)

        assert outcome == TickOutcome.SKIPPED
        assert result_state.label == RoadType.UNKNOWN
        assert result_state.snapshot()["counters"]["classified"] == 0

    def test_failure_dropped_when_cancelled(self, result_state):
        cancel = threading.Event()
        cancel.set()
        sampler = _sampler(StubSource([OSError("decoder gone")]), result_state)

        assert sampler.tick(SamplerState.ENABLED, cancel) == TickOutcome.SKIPPED
        assert result_state.snapshot()["counters"]["failed"] == 0


class TestLifecycle:
    def test_start_runs_ticks_and_stop_resets(self, result_state):
        sampler = _sampler(StubSource(), result_state, interval_ms=20)
        done = threading.Event()
        sampler.add_callback(lambda p: done.set())

        sampler.start()
        try:
            assert sampler.is_running
            assert result_state.running
            assert sampler.clock.is_playing
            assert done.wait(timeout=2.0)
            assert result_state.label == RoadType.CONCRETE
        finally:
            sampler.stop()

        assert sampler.state == SamplerState.DISABLED
        assert not result_state.running
        assert result_state.label == RoadType.UNKNOWN
        assert not sampler.clock.is_playing

    def test_no_ticks_after_stop(self, result_state):
        source = StubSource()
        sampler = _sampler(source, result_state, interval_ms=10)
        sampler.start()
        time.sleep(0.05)
        sampler.stop()

        count = len(source.positions)
        time.sleep(0.05)
        assert len(source.positions) == count

    def test_toggle(self, result_state):
        sampler = _sampler(StubSource(), result_state, interval_ms=1000)
        assert sampler.toggle() is True
        assert sampler.toggle() is False

    def test_start_and_stop_are_idempotent(self, result_state):
        sampler = _sampler(StubSource(), result_state, interval_ms=1000)
        sampler.stop()
        sampler.start()
        sampler.start()
        assert sampler.is_running
        sampler.stop()
        sampler.stop()
        assert not sampler.is_running

    def test_start_while_stop_is_joining(self, result_state):
        sampler = _sampler(StubSource(), result_state, interval_ms=1000)
        sampler.start()
        thread = sampler._thread
        join = thread.join

        def join_then_restart(timeout=None):
            join(timeout)
            sampler.start()

        thread.join = join_then_restart
        try:
            sampler.stop()

            assert sampler.is_running
            assert result_state.running
            assert sampler.clock.is_playing
        finally:
            sampler.stop()

        assert not result_state.running
        assert not sampler.clock.is_playing

    def test_late_tick_does_not_overwrite_reset_label(self, result_state):
        release = threading.Event()
        entered = threading.Event()

        class SlowExecutor(FakeExecutor):
            def run(self, tensor):
                entered.set()
                release.wait(timeout=2.0)
                return super().run(tensor)

        sampler = FrameSampler(
            StubSource(),
            PlaybackClock(10000),
            RoadTypePredictor(SlowExecutor()),
            result_state,
            SamplerConfig(interval_ms=1000, join_timeout_s=0.01),
        )
        sampler.start()
        thread = sampler._thread
        assert entered.wait(timeout=2.0)

        sampler.stop()
        release.set()
        thread.join(timeout=2.0)

        assert result_state.label == RoadType.UNKNOWN
        assert result_state.snapshot()["counters"]["classified"] == 0
