# animation.py
"""
Drives the endless ping-pong animation.

This module defines the AnimationController class, which owns the cycle
timing. Each frame it clears the surface, draws the particles at the
current elapsed time, and once a cycle has run its full duration it swaps
the dataset's start/end roles and begins the next cycle.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional

from constants import DEFAULT_LOG_THROTTLE_FRAMES
from particle import ParticleDataset
from render import RenderStage
from scheduler import FrameHandle, FrameLoop

# --- Data Contracts ---
#
# class AnimationController:
#   - __init__(self, dataset, render_stage, scheduler, params):
#     - Inputs:
#       - params: The "animation" section of config.json plus the
#         optional "log_throttle_frames" run control value.
#         - "duration": float, milliseconds
#   - animate(self) -> None:
#     - Side Effects: Resets cycle_start_time to None and registers one
#       frame callback with the scheduler. State becomes RUNNING.
#   - on_frame(self, time: float) -> None:
#     - Inputs: frame time in seconds.
#     - Side Effects: Clears and draws one frame. At the end of a cycle
#       cancels its registration, swaps the dataset and calls animate().
#     - Invariants: The dataset is only swapped here, after the frame's
#       draw call has returned. At most one registration exists at a time.


class AnimationState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class AnimationController:
    """
    A two-state machine (IDLE, RUNNING) that re-arms itself at each cycle boundary.
    """
    def __init__(
        self,
        dataset: ParticleDataset,
        render_stage: RenderStage,
        scheduler: FrameLoop,
        params: Dict[str, Any],
    ):
        self.dataset = dataset
        self.render_stage = render_stage
        self.scheduler = scheduler
        self.duration = float(params['duration'])
        self.log_throttle = params.get('log_throttle_frames', DEFAULT_LOG_THROTTLE_FRAMES)

        self.state = AnimationState.IDLE
        self.cycle_start_time: Optional[float] = None
        self.cycle_count = 0
        self.frame_count = 0
        self.last_elapsed: Optional[float] = None
        self._handle: Optional[FrameHandle] = None

        logging.info(f"AnimationController initialized with a {self.duration:g}ms cycle.")

    def animate(self) -> None:
        """Starts (or restarts) a cycle. Elapsed time is anchored on the next frame."""
        if self._handle is not None and not self._handle.cancelled:
            self._handle.cancel()
        self.cycle_start_time = None
        self._handle = self.scheduler.schedule_frame(self.on_frame)
        self.state = AnimationState.RUNNING
        logging.debug(f"Cycle {self.cycle_count} scheduled.")

    def stop(self) -> None:
        """Cancels the frame registration. The current frame, if any, completes."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.state = AnimationState.IDLE
        logging.info(f"Animation stopped after {self.cycle_count} completed cycles.")

    def elapsed_ms(self, time: float) -> float:
        """Milliseconds since the cycle started. The frame clock ticks in seconds."""
        return 1000.0 * (time - self.cycle_start_time)

    def on_frame(self, time: float) -> None:
        if self.cycle_start_time is None:
            self.cycle_start_time = time

        self.render_stage.clear()
        elapsed = self.elapsed_ms(time)
        progress = self.render_stage.draw(elapsed)
        self.last_elapsed = elapsed
        self.frame_count += 1

        # Hot loops must throttle logs
        if self.log_throttle and self.frame_count % self.log_throttle == 0:
            logging.debug(
                f"Frame {self.frame_count} | cycle {self.cycle_count} | "
                f"elapsed {elapsed:.1f}ms | progress {progress:.3f}"
            )

        if elapsed > self.duration:
            self._complete_cycle(elapsed)

    def _complete_cycle(self, elapsed: float) -> None:
        # The draw for this frame has already returned, so nothing reads
        # the old start/end assignment any more.
        self._handle.cancel()
        self._handle = None
        self.state = AnimationState.IDLE

        self.dataset.swap()
        self.cycle_count += 1
        logging.info(
            f"Cycle {self.cycle_count} complete after {elapsed:.1f}ms. "
            f"Start and end swapped."
        )
        self.animate()
