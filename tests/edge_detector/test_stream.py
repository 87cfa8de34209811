"""Tests for the streaming frame loop."""

from unittest.mock import MagicMock

import numpy as np

from edge_detector.buffers import Frame
from edge_detector.orchestrator import EdgeDetectionSession
from edge_detector.stream import FrameLoop

from conftest import rgba_from_luminance


def make_frame(size=5, value=0):
    values = np.full((size, size), value, dtype=np.uint8)
    values[:, size // 2:] = 255
    return Frame(rgba_from_luminance(values), size, size)


def list_source(frames):
    """Source popping frames off the given list, then None."""

    def read():
        return frames.pop(0) if frames else None
    return read


def test_tick_processes_frame_and_feeds_sink():
    sink = MagicMock()
    frame = make_frame()
    loop = FrameLoop(list_source([frame]), EdgeDetectionSession(), sink)

    results = loop.tick()

    assert set(results) == {"sobel", "roberts", "prewitt", "laplace", "canny"}
    sink.assert_called_once()
    assert sink.call_args.args[0] is frame
    assert loop.frames_processed == 1


def test_zero_size_frames_are_deferred():
    """Frames with unknown dimensions are skipped until the next tick."""
    session = MagicMock(spec=EdgeDetectionSession)
    sink = MagicMock()
    empty = Frame(np.empty(0, dtype=np.uint8), 0, 0)
    loop = FrameLoop(list_source([empty, empty, make_frame()]), session, sink)

    assert loop.tick() is None
    assert loop.tick() is None
    session.submit_frame.assert_not_called()

    loop.tick()
    session.submit_frame.assert_called_once()
    assert loop.frames_deferred == 2
    assert loop.running


def test_stop_prevents_further_processing():
    session = MagicMock(spec=EdgeDetectionSession)
    loop = FrameLoop(list_source([make_frame(), make_frame()]), session, MagicMock())
    loop.tick()
    loop.stop()

    assert loop.tick() is None
    assert session.submit_frame.call_count == 1
    assert not loop.running


def test_results_in_flight_at_stop_are_dropped():
    """A tick that finishes after stop() doesn't reach the sink."""
    sink = MagicMock()
    session = MagicMock(spec=EdgeDetectionSession)
    loop = FrameLoop(list_source([make_frame()]), session, sink)

    def submit(*args):
        loop.stop()
        return {"sobel": np.zeros(4, dtype=np.uint8)}
    session.submit_frame.side_effect = submit

    assert loop.tick() is None
    sink.assert_not_called()
    assert loop.frames_processed == 0


def test_run_until_source_dry():
    sink = MagicMock()
    loop = FrameLoop(list_source([make_frame(), make_frame(), make_frame()]), EdgeDetectionSession(), sink)
    assert loop.run() == 3
    assert sink.call_count == 3
    assert not loop.running


def test_run_respects_max_frames_and_on_tick():
    on_tick = MagicMock()
    frames = [make_frame() for _ in range(5)]
    loop = FrameLoop(list_source(frames), EdgeDetectionSession(), MagicMock())
    assert loop.run(max_frames=2, on_tick=on_tick) == 2
    assert on_tick.call_count == 2
    assert len(frames) == 3


def test_on_tick_can_stop_loop():
    loop = FrameLoop(list_source([make_frame() for _ in range(5)]), EdgeDetectionSession(), MagicMock())
    assert loop.run(on_tick=loop.stop) == 1
