# visualization.py
"""
Handles the on-screen rendering of the animation using Pygame.
"""
import logging
import pygame
import numpy as np
from typing import Optional, Tuple

from constants import FPS, WINDOW_TITLE
from render import BackendError, RenderBackend, rasterize_points
from scheduler import FrameLoop

# --- Data Contracts ---
#
# class PygameBackend(RenderBackend):
#   - __init__(self, width: int, height: int, title: str):
#     - Side Effects: Initializes Pygame and opens a window exactly the
#       size of the stage.
#     - Raises: BackendError if the display cannot be created.
#
# class PygameFrameLoop(FrameLoop):
#   - run(self, max_frames: Optional[int]) -> None:
#     - Side Effects: Dispatches one frame per display refresh, presents
#       it, and exits on QUIT, ESC, stop(), or after max_frames frames.


class PygameBackend(RenderBackend):
    """
    Draws points onto a Pygame window by writing straight into its pixel array.
    """
    def __init__(self, width: int, height: int, title: str = WINDOW_TITLE):
        """
        Initializes Pygame and the display window.
        """
        pygame.init()
        try:
            self.screen = pygame.display.set_mode((int(width), int(height)), 0, 32)
        except pygame.error as e:
            msg = f"Could not create a {width}x{height} display: {e}"
            logging.critical(msg)
            pygame.quit()
            raise BackendError(msg) from e

        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        logging.info(f"Pygame backend initialized with display ({width}x{height}).")

    @property
    def viewport(self) -> Tuple[int, int]:
        return self.screen.get_size()

    def clear(self, color, depth) -> None:
        # The display surface has no alpha channel and no depth buffer, so
        # only the RGB part of the clear color applies.
        r, g, b, _ = color
        self.screen.fill((int(r * 255), int(g * 255), int(b * 255)))

    def draw_points(self, ndc, colors, point_width) -> None:
        pixels = pygame.surfarray.pixels3d(self.screen)
        try:
            rasterize_points(pixels, np.asarray(ndc), np.asarray(colors), point_width)
        finally:
            # Release the surface lock before the display is flipped.
            del pixels

    def present(self) -> None:
        pygame.display.flip()

    def close(self) -> None:
        """Shuts down Pygame."""
        pygame.quit()


class PygameFrameLoop(FrameLoop):
    """
    A real-time frame loop paced by pygame.time.Clock.

    The frame time handed to callbacks is the Pygame clock in seconds.
    """
    def __init__(self, backend: PygameBackend, fps: int = FPS):
        super().__init__()
        self.backend = backend
        self.fps = fps

    def _handle_events(self) -> bool:
        """Returns False once the user asks to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down frame loop.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down frame loop.")
                return False
        return True

    def run(self, max_frames: Optional[int] = None) -> None:
        """
        Runs frames until the window is closed. A max_frames of None or 0
        means no limit.
        """
        self.running = True
        logging.info(f"Pygame frame loop started at {self.fps} fps.")
        while self.running:
            if not self._handle_events():
                self.running = False
                break

            self.run_frame(pygame.time.get_ticks() / 1000.0)
            self.backend.present()
            self.backend.clock.tick(self.fps)

            if max_frames and self.frame_count >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping frame loop.")
                self.running = False

        logging.info(
            f"Pygame frame loop finished after {self.frame_count} frames "
            f"({self.backend.clock.get_fps():.1f} fps at the end)."
        )
