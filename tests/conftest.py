"""Shared fixtures for the animation tests."""

import logging

import numpy as np
import pytest

from particle import ParticleDataset
from render import HeadlessBackend


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() so handlers do not leak between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def animation_params():
    return {
        "num_points": 1,
        "point_width": 2,
        "stage_width": 500,
        "stage_height": 500,
        "duration": 1000,
        "seed": 7,
    }


@pytest.fixture
def single_particle():
    """One particle travelling from the top-left corner to the bottom-right."""
    return ParticleDataset.from_arrays(
        position_start=[[0.0, 0.0]],
        position_end=[[500.0, 500.0]],
        color_start=[[0.0, 1.0, 0.0]],
        color_end=[[0.0, 0.5, 0.9]],
    )


@pytest.fixture
def small_dataset():
    params = {"num_points": 64, "seed": 3}
    return ParticleDataset(params, 500, 500)


@pytest.fixture
def backend():
    return HeadlessBackend(500, 500)


def normalized(positions, width=500.0, height=500.0):
    positions = np.asarray(positions, dtype=np.float64)
    return np.stack(
        [2.0 * (positions[:, 0] / width - 0.5), -2.0 * (positions[:, 1] / height - 0.5)],
        axis=1,
    )
