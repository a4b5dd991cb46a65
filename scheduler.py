# scheduler.py
"""
Frame scheduling primitives.

A FrameLoop keeps a set of per-frame callbacks and invokes each of them
once per display frame with the frame time in seconds. Callbacks are
registered with schedule_frame() and deregistered through the returned
FrameHandle. Concrete loops decide where the frame time comes from.
"""
import logging
from typing import Callable, List, Optional

from constants import FPS
from render import RenderBackend

FrameCallback = Callable[[float], None]

# --- Data Contracts ---
#
# class FrameLoop:
#   - schedule_frame(self, callback: FrameCallback) -> FrameHandle:
#     - Side Effects: Registers callback. A callback registered while a
#       frame is being dispatched first runs on the following frame.
#
#   - run_frame(self, time: float) -> None:
#     - Inputs: time, seconds on the loop's clock. Non-decreasing.
#     - Side Effects: Calls every handle that was active when the frame
#       began and is still not cancelled when its turn comes.
#     - Invariants: A cancelled handle is never invoked again.


class FrameHandle:
    """A registration returned by FrameLoop.schedule_frame()."""
    def __init__(self, loop: "FrameLoop", callback: FrameCallback):
        self._loop = loop
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        """Deregisters the callback. It will not be invoked on any later frame."""
        if not self.cancelled:
            self.cancelled = True
            self._loop._discard(self)


class FrameLoop:
    """
    Dispatches registered callbacks once per frame.

    The base class has no clock of its own; run_frame() is called with the
    frame time by a subclass or by the caller.
    """
    def __init__(self):
        self._handles: List[FrameHandle] = []
        self.frame_count = 0
        self.running = False

    def schedule_frame(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle(self, callback)
        self._handles.append(handle)
        return handle

    def _discard(self, handle: FrameHandle) -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    @property
    def pending(self) -> int:
        """Number of active registrations."""
        return len(self._handles)

    def run_frame(self, time: float) -> None:
        # Snapshot first, so callbacks may cancel or register freely.
        for handle in list(self._handles):
            if not handle.cancelled:
                handle.callback(time)
        self.frame_count += 1

    def stop(self) -> None:
        """Asks a running loop to exit after the current frame."""
        if self.running:
            logging.info("Frame loop stop requested.")
        self.running = False


class FixedStepFrameLoop(FrameLoop):
    """
    A headless loop with a simulated clock that advances 1/fps per frame.

    It does not sleep, so frames run as fast as the callbacks allow.
    """
    def __init__(self, backend: RenderBackend, fps: int = FPS):
        super().__init__()
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.backend = backend
        self.fps = fps
        self.dt = 1.0 / fps

    @property
    def time(self) -> float:
        return self.frame_count * self.dt

    def run(self, max_frames: Optional[int] = None) -> None:
        """
        Runs frames until stopped. A max_frames of None or 0 means no limit.
        """
        self.running = True
        logging.info(f"Headless frame loop started at {self.fps} simulated fps.")
        while self.running:
            self.run_frame(self.time)
            self.backend.present()
            if max_frames and self.frame_count >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping frame loop.")
                self.running = False
        logging.info(f"Headless frame loop finished after {self.frame_count} frames.")
