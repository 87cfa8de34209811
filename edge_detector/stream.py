"""Per-tick driver for streaming input."""

import logging
from typing import Callable, Dict, Optional

import numpy as np

from .buffers import Frame
from .orchestrator import EdgeDetectionSession

logger = logging.getLogger(__name__)

FrameSource = Callable[[], Optional[Frame]]
ResultSink = Callable[[Frame, Dict[str, np.ndarray]], None]


class FrameLoop:
    """Pulls frames from a source once per tick and feeds a session.

    A frame with zero width or height is skipped and the loop simply
    waits for the next tick. After stop() the session is never invoked
    again by this loop, and results of a tick that was in flight when
    stop() was called are dropped instead of reaching the sink.
    """

    def __init__(self, source: FrameSource, session: EdgeDetectionSession, sink: ResultSink):
        self._source = source
        self._session = session
        self._sink = sink
        self._stopped = False
        self.frames_processed = 0
        self.frames_deferred = 0

    @property
    def running(self) -> bool:
        return not self._stopped

    def stop(self) -> None:
        if not self._stopped:
            self._stopped = True
            logger.info("Stream stopped after %d frames", self.frames_processed)

    def tick(self) -> Optional[Dict[str, np.ndarray]]:
        """Process one frame.

        Returns:
            Operator results, or None if stopped, deferred or the source
            ran dry (which also stops the loop)
        """
        if self._stopped:
            return None

        frame = self._source()
        if frame is None:
            self.stop()
            return None
        if frame.width == 0 or frame.height == 0:
            self.frames_deferred += 1
            logger.debug("Frame size not known yet, deferring")
            return None

        results = self._session.submit_frame(frame.pixels, frame.width, frame.height)
        if self._stopped:
            return None

        self.frames_processed += 1
        self._sink(frame, results)
        return results

    def run(self, max_frames: Optional[int] = None, on_tick: Optional[Callable[[], None]] = None) -> int:
        """Tick until stopped, the source runs dry or max_frames were processed.

        Args:
            max_frames: Stop after this many processed frames
            on_tick: Called after every tick (e.g. to pump a UI event loop)

        Returns:
            Number of frames processed
        """
        logger.info("Stream started")
        while not self._stopped:
            self.tick()
            if on_tick is not None:
                on_tick()
            if max_frames is not None and self.frames_processed >= max_frames:
                self.stop()
        return self.frames_processed
