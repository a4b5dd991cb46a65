# particle.py
"""
Manages the attribute data of all particles in the animation.

This module defines the ParticleDataset class, which is responsible for
generating and storing the start/end positions and colors of every
particle in column-major NumPy arrays, and for swapping the start and end
roles between animation cycles.
"""
import logging
import numpy as np
from typing import Any, Dict, Iterator, NamedTuple, Tuple

from constants import (
    DEFAULT_START_SPREAD, DEFAULT_END_SPREAD, DEFAULT_SEED, RING_DIVISOR,
    END_COLOR_BLUE, END_COLOR_GREEN_SCALE
)

# --- Data Contracts ---
#
# class ParticleDataset:
#   - __init__(self, params: Dict[str, Any], width: int, height: int):
#     - Inputs:
#       - params: The "animation" section of config.json.
#         - "num_points": int
#         - "seed": int
#         - "start_spread": float (optional)
#         - "end_spread": float (optional)
#       - width, height: stage dimensions in pixels.
#     - Side Effects: Generates the particle attributes.
#     - Invariants:
#       - self.positions is a NumPy array of shape (2, N, 2), dtype float64.
#       - self.colors is a NumPy array of shape (2, N, 3), dtype float64.
#       - Slot self.front holds the start attributes, slot 1 - self.front
#         holds the end attributes.
#
#   - swap(self) -> None:
#     - Side Effects: Flips self.front. No element is copied or mutated.
#     - Invariants: swap() twice restores the original assignment.
#       Must only be called between frames.


class Particle(NamedTuple):
    """A row view of one particle. Built on demand from the columns."""
    start_position: Tuple[float, float]
    end_position: Tuple[float, float]
    start_color: Tuple[float, float, float]
    end_color: Tuple[float, float, float]


class ParticleDataset:
    """
    Double-buffered columnar storage for the start/end attributes of N particles.
    """
    def __init__(self, params: Dict[str, Any], width: int, height: int):
        """
        Generates the particle dataset.

        Start positions form a jittered ring around the stage center, end
        positions are scattered widely around it. The start color is a
        random green, the end color is derived from it and leans blue.

        Args:
            params (Dict[str, Any]): Animation parameters from config.
            width (int): The width of the stage in pixels.
            height (int): The height of the stage in pixels.
        """
        self.particle_count = int(params['num_points'])
        self.seed = params.get('seed', DEFAULT_SEED)
        start_spread = params.get('start_spread', DEFAULT_START_SPREAD)
        end_spread = params.get('end_spread', DEFAULT_END_SPREAD)

        # All randomness comes from one seeded generator so a run can be
        # reproduced exactly.
        self.rng = np.random.default_rng(self.seed)

        n = self.particle_count
        index = np.arange(n, dtype=np.float64)
        positions = np.empty((2, n, 2), dtype=np.float64)
        colors = np.zeros((2, n, 3), dtype=np.float64)

        # Slot 0: the start ring.
        positions[0, :, 0] = (self.rng.normal(0.0, start_spread, n) + np.cos(index)) * (width / RING_DIVISOR) + width / 2
        positions[0, :, 1] = (self.rng.normal(0.0, start_spread, n) + np.sin(index)) * (height / RING_DIVISOR) + height / 2

        # Slot 1: the wide scatter.
        positions[1, :, 0] = self.rng.normal(0.0, end_spread, n) * width + width / 2
        positions[1, :, 1] = self.rng.normal(0.0, end_spread, n) * height + height / 2

        green = self.rng.random(n)
        colors[0, :, 1] = green
        colors[1, :, 1] = green * END_COLOR_GREEN_SCALE
        colors[1, :, 2] = END_COLOR_BLUE

        self._set_buffers(positions, colors)

        logging.info(
            f"ParticleDataset initialized with {self.particle_count} particles "
            f"on a {width}x{height} stage."
        )
        logging.debug(
            f"Attribute buffers created. "
            f"Positions shape: {self.positions.shape}, "
            f"Colors shape: {self.colors.shape}"
        )

    @classmethod
    def from_arrays(cls, position_start, position_end, color_start, color_end) -> "ParticleDataset":
        """
        Builds a dataset from explicit columns instead of generating one.

        Raises:
            ValueError: If the columns do not share a particle count or
                have the wrong width.
        """
        position_start = np.asarray(position_start, dtype=np.float64)
        position_end = np.asarray(position_end, dtype=np.float64)
        color_start = np.asarray(color_start, dtype=np.float64)
        color_end = np.asarray(color_end, dtype=np.float64)

        n = position_start.shape[0] if position_start.ndim == 2 else -1
        expected = {
            'position_start': (position_start, (n, 2)),
            'position_end': (position_end, (n, 2)),
            'color_start': (color_start, (n, 3)),
            'color_end': (color_end, (n, 3)),
        }
        for name, (column, shape) in expected.items():
            if n <= 0 or column.shape != shape:
                msg = f"Column '{name}' has shape {column.shape}, expected {shape}."
                logging.error(msg)
                raise ValueError(msg)

        dataset = cls.__new__(cls)
        dataset.particle_count = n
        dataset.seed = None
        dataset.rng = None
        dataset._set_buffers(
            np.stack([position_start, position_end]),
            np.stack([color_start, color_end]),
        )
        logging.debug(f"ParticleDataset built from arrays with {n} particles.")
        return dataset

    def _set_buffers(self, positions: np.ndarray, colors: np.ndarray) -> None:
        # The kernel reads the columns directly, so keep them contiguous.
        self.positions = np.ascontiguousarray(positions)
        self.colors = np.ascontiguousarray(colors)
        self.front = 0

    # --- Columnar views ---

    @property
    def position_start(self) -> np.ndarray:
        return self.positions[self.front]

    @property
    def position_end(self) -> np.ndarray:
        return self.positions[1 - self.front]

    @property
    def color_start(self) -> np.ndarray:
        return self.colors[self.front]

    @property
    def color_end(self) -> np.ndarray:
        return self.colors[1 - self.front]

    def swap(self) -> None:
        """Exchanges the start and end roles by redirecting the front index."""
        self.front = 1 - self.front
        logging.debug(f"Dataset swapped, front buffer is now slot {self.front}.")

    # --- Row view ---

    def __len__(self) -> int:
        return self.particle_count

    def particle(self, i: int) -> Particle:
        """Returns particle i as seen through the current start/end roles."""
        return Particle(
            start_position=tuple(self.position_start[i]),
            end_position=tuple(self.position_end[i]),
            start_color=tuple(self.color_start[i]),
            end_color=tuple(self.color_end[i]),
        )

    def __iter__(self) -> Iterator[Particle]:
        for i in range(self.particle_count):
            yield self.particle(i)
