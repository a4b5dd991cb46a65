"""Tests for frame registration, cancellation and the headless loop."""

import pytest

from render import HeadlessBackend
from scheduler import FixedStepFrameLoop, FrameLoop


class TestFrameLoop:
    """Test callback dispatch."""

    def test_callback_receives_frame_time(self):
        loop = FrameLoop()
        times = []
        loop.schedule_frame(times.append)
        loop.run_frame(1.0)
        loop.run_frame(1.5)
        assert times == [1.0, 1.5]
        assert loop.frame_count == 2

    def test_cancelled_handle_is_not_invoked(self):
        loop = FrameLoop()
        times = []
        handle = loop.schedule_frame(times.append)
        loop.run_frame(0.0)
        handle.cancel()
        loop.run_frame(0.1)
        assert times == [0.0]
        assert handle.cancelled
        assert loop.pending == 0

    def test_cancel_twice_is_harmless(self):
        loop = FrameLoop()
        handle = loop.schedule_frame(lambda t: None)
        handle.cancel()
        handle.cancel()
        assert loop.pending == 0

    def test_registration_during_frame_runs_next_frame(self):
        loop = FrameLoop()
        calls = []

        def first(time):
            calls.append(("first", time))
            loop.schedule_frame(lambda t: calls.append(("second", t)))

        handle = loop.schedule_frame(first)
        loop.run_frame(0.0)
        handle.cancel()
        assert calls == [("first", 0.0)]

        loop.run_frame(0.5)
        assert calls == [("first", 0.0), ("second", 0.5)]

    def test_cancel_during_frame_takes_effect_immediately(self):
        loop = FrameLoop()
        calls = []
        handles = []

        def canceller(time):
            calls.append("canceller")
            handles[1].cancel()

        handles.append(loop.schedule_frame(canceller))
        handles.append(loop.schedule_frame(lambda t: calls.append("victim")))
        loop.run_frame(0.0)
        assert calls == ["canceller"]


class TestFixedStepFrameLoop:
    """Test the headless loop."""

    def test_runs_max_frames(self):
        backend = HeadlessBackend(10, 10)
        loop = FixedStepFrameLoop(backend, fps=50)
        times = []
        loop.schedule_frame(times.append)
        loop.run(4)
        assert loop.frame_count == 4
        assert backend.frames_presented == 4
        assert times == pytest.approx([0.0, 0.02, 0.04, 0.06])

    def test_stop_from_callback(self):
        loop = FixedStepFrameLoop(HeadlessBackend(10, 10), fps=60)

        def stop_on_third(time):
            if loop.frame_count == 2:
                loop.stop()

        loop.schedule_frame(stop_on_third)
        loop.run()
        assert loop.frame_count == 3
        assert not loop.running

    def test_rejects_non_positive_fps(self):
        with pytest.raises(ValueError):
            FixedStepFrameLoop(HeadlessBackend(10, 10), fps=0)
