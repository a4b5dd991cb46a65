# render.py
"""
Handles the per-frame interpolation and the draw submission.

This module defines the RenderStage class, which blends every particle's
start and end attributes by the eased cycle progress and submits all of
them to a rendering backend as a single batch of point primitives. The
per-particle math runs in a Numba-parallel kernel, one independent
iteration per particle.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np
from numba import jit, prange
from numba.core.errors import NumbaError

from constants import CLEAR_COLOR, CLEAR_DEPTH, DEFAULT_POINT_WIDTH
from easing import compute_progress_numba
from particle import ParticleDataset

# --- Data Contracts ---
#
# class RenderStage:
#   - __init__(self, dataset: ParticleDataset, backend: RenderBackend,
#              params: Dict[str, Any]):
#     - Inputs:
#       - params: The "animation" section of config.json.
#         - "point_width", "stage_width", "stage_height": float
#         - "duration": float, milliseconds
#     - Side Effects: Allocates the output buffers reused every frame.
#
#   - draw(self, elapsed: float) -> float:
#     - Inputs: elapsed milliseconds since the cycle started, >= 0.
#     - Outputs: the progress used for this frame, in [0, 1].
#     - Side Effects: Overwrites self.current_positions, self.ndc and
#       self.current_colors, then issues one draw of N points.
#     - Invariants: Only reads the dataset. Never mutates it.


class BackendError(RuntimeError):
    """The rendering backend could not be set up. Fatal at startup."""


@dataclass
class FrameUniforms:
    """Values shared by every particle during one frame."""
    point_width: float
    stage_width: float
    stage_height: float
    duration: float
    elapsed: float


def normalize_coords(positions, stage_width: float, stage_height: float) -> np.ndarray:
    """
    Maps pixel-space positions (origin top-left, y down) to normalized device
    coordinates (origin center, y up). Works on a single (x, y) or an (N, 2)
    array.
    """
    positions = np.asarray(positions, dtype=np.float64)
    ndc = np.empty_like(positions)
    ndc[..., 0] = 2.0 * ((positions[..., 0] / stage_width) - 0.5)
    ndc[..., 1] = -(2.0 * ((positions[..., 1] / stage_height) - 0.5))
    return ndc


@jit(nopython=True, parallel=True)
def _interpolate_numba(
    position_start, position_end, color_start, color_end,
    duration, elapsed, stage_width, stage_height,
    out_positions, out_ndc, out_colors
):
    """
    Numba-jitted per-particle kernel.

    Each iteration touches only its own particle's four attributes and the
    frame uniforms, so the loop runs in parallel without synchronization.
    Uses mix(a, b, t) = a * (1 - t) + b * t, which is exact at t = 0 and t = 1.
    """
    t = compute_progress_numba(elapsed, duration)
    s = 1.0 - t
    particle_count = position_start.shape[0]

    for i in prange(particle_count):
        x = position_start[i, 0] * s + position_end[i, 0] * t
        y = position_start[i, 1] * s + position_end[i, 1] * t
        out_positions[i, 0] = x
        out_positions[i, 1] = y

        out_ndc[i, 0] = 2.0 * ((x / stage_width) - 0.5)
        out_ndc[i, 1] = -(2.0 * ((y / stage_height) - 0.5))

        for c in range(3):
            out_colors[i, c] = color_start[i, c] * s + color_end[i, c] * t
        out_colors[i, 3] = 1.0

    return t


def rasterize_points(pixels: np.ndarray, ndc: np.ndarray, colors: np.ndarray, point_width: float) -> None:
    """
    Draws square points into an (width, height, 3) uint8 pixel array.

    NDC is mapped onto the full array the way a viewport transform does,
    and a pixel is lit when its center falls inside the point square.
    Points falling partly or fully outside the array are clipped. Later
    points overwrite earlier ones.
    """
    width, height = pixels.shape[0], pixels.shape[1]
    size = max(int(round(point_width)), 1)

    xs = np.ceil((ndc[:, 0] + 1.0) * 0.5 * width - size / 2.0 - 0.5).astype(np.int64)
    ys = np.ceil((1.0 - ndc[:, 1]) * 0.5 * height - size / 2.0 - 0.5).astype(np.int64)
    rgb = (np.clip(colors[:, :3], 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)

    for dx in range(size):
        px = xs + dx
        for dy in range(size):
            py = ys + dy
            inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
            pixels[px[inside], py[inside]] = rgb[inside]


class RenderBackend(ABC):
    """
    The drawing surface the render stage submits to.

    Implementations own the window or framebuffer. They are expected to be
    fully initialized on construction and raise BackendError otherwise.
    """

    @property
    @abstractmethod
    def viewport(self) -> Tuple[int, int]:
        """Surface size in pixels, (width, height)."""

    @abstractmethod
    def clear(self, color: Tuple[float, float, float, float], depth: float) -> None:
        """Resets the whole surface before a frame is drawn."""

    @abstractmethod
    def draw_points(self, ndc: np.ndarray, colors: np.ndarray, point_width: float) -> None:
        """Draws len(ndc) points. colors is (N, 4) RGBA in [0, 1]."""

    @abstractmethod
    def present(self) -> None:
        """Makes the finished frame visible."""

    def close(self) -> None:
        """Releases the surface. Default is a no-op."""


class HeadlessBackend(RenderBackend):
    """
    An in-memory backend that rasterizes into NumPy color and depth buffers.

    Useful for running without a display and for inspecting frames.
    """
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise BackendError(f"Invalid headless surface size {width}x{height}.")
        self._viewport = (int(width), int(height))
        self.framebuffer = np.zeros((self._viewport[0], self._viewport[1], 3), dtype=np.uint8)
        self.alpha = np.zeros((self._viewport[0], self._viewport[1]), dtype=np.float32)
        self.depth = np.ones((self._viewport[0], self._viewport[1]), dtype=np.float32)
        self.draw_calls = 0
        self.last_draw_count = 0
        self.frames_presented = 0
        logging.info(f"Headless backend initialized ({width}x{height}).")

    @property
    def viewport(self) -> Tuple[int, int]:
        return self._viewport

    def clear(self, color, depth) -> None:
        r, g, b, a = color
        self.framebuffer[...] = (np.clip([r, g, b], 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
        self.alpha[...] = a
        self.depth[...] = depth

    def draw_points(self, ndc, colors, point_width) -> None:
        rasterize_points(self.framebuffer, ndc, colors, point_width)
        self.draw_calls += 1
        self.last_draw_count = len(ndc)

    def present(self) -> None:
        self.frames_presented += 1


class RenderStage:
    """
    Interpolates the particle attributes for a frame and issues the draw.
    """
    def __init__(self, dataset: ParticleDataset, backend: RenderBackend, params: Dict[str, Any]):
        """
        Initializes the render stage.

        Args:
            dataset (ParticleDataset): The particles to draw. Read only.
            backend (RenderBackend): Where the points are submitted.
            params (Dict[str, Any]): Animation parameters from config.
        """
        self.dataset = dataset
        self.backend = backend
        self.point_width = float(params.get('point_width', DEFAULT_POINT_WIDTH))
        self.stage_width = float(params['stage_width'])
        self.stage_height = float(params['stage_height'])
        self.duration = float(params['duration'])

        # Output buffers are allocated once and rewritten every frame.
        n = len(dataset)
        self.current_positions = np.empty((n, 2), dtype=np.float64)
        self.ndc = np.empty((n, 2), dtype=np.float64)
        self.current_colors = np.empty((n, 4), dtype=np.float64)
        self.last_progress = None

        viewport = tuple(backend.viewport)
        if viewport != (int(self.stage_width), int(self.stage_height)):
            logging.warning(
                f"Backend viewport {viewport[0]}x{viewport[1]} does not match the "
                f"{self.stage_width:g}x{self.stage_height:g} stage. Points will misregister."
            )

        logging.info(
            f"RenderStage initialized for {n} points "
            f"(point width {self.point_width:g}px, duration {self.duration:g}ms)."
        )

    def compile(self) -> None:
        """
        Compiles the interpolation kernel ahead of the first frame.

        Raises:
            BackendError: If Numba cannot compile the kernel.
        """
        logging.info("Compiling interpolation kernel...")
        one = np.zeros((1, 2), dtype=np.float64)
        try:
            _interpolate_numba(
                one, one, np.zeros((1, 3)), np.zeros((1, 3)),
                self.duration, 0.0, self.stage_width, self.stage_height,
                np.empty((1, 2)), np.empty((1, 2)), np.empty((1, 4))
            )
        except NumbaError as e:
            msg = f"Interpolation kernel failed to compile: {e}"
            logging.critical(msg)
            raise BackendError(msg) from e
        logging.info("Interpolation kernel compiled.")

    def uniforms(self, elapsed: float) -> FrameUniforms:
        return FrameUniforms(
            point_width=self.point_width,
            stage_width=self.stage_width,
            stage_height=self.stage_height,
            duration=self.duration,
            elapsed=float(elapsed),
        )

    def clear(self) -> None:
        self.backend.clear(CLEAR_COLOR, CLEAR_DEPTH)

    def interpolate(self, elapsed: float) -> float:
        """Fills the output buffers for the given elapsed time and returns the progress."""
        u = self.uniforms(elapsed)
        progress = _interpolate_numba(
            self.dataset.position_start, self.dataset.position_end,
            self.dataset.color_start, self.dataset.color_end,
            u.duration, u.elapsed, u.stage_width, u.stage_height,
            self.current_positions, self.ndc, self.current_colors
        )
        self.last_progress = float(progress)
        return self.last_progress

    def draw(self, elapsed: float) -> float:
        """Interpolates every particle and submits them as one batch of points."""
        progress = self.interpolate(elapsed)
        self.backend.draw_points(self.ndc, self.current_colors, self.point_width)
        return progress
