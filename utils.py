# utils.py
"""
Utility functions for the animation framework.

This module provides helper functions, such as logging setup and config
loading, that are used across different parts of the application but do
not belong to a specific domain like rendering or particle generation.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import (
    DEFAULT_NUM_POINTS, DEFAULT_POINT_WIDTH, DEFAULT_STAGE_WIDTH,
    DEFAULT_STAGE_HEIGHT, DEFAULT_DURATION_MS, DEFAULT_SEED,
    DEFAULT_START_SPREAD, DEFAULT_END_SPREAD
)

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# animation_params(config: Dict[str, Any]) -> Dict[str, Any]:
#   - Outputs: The "animation" section with every missing key filled in
#     from constants.py and validated by validate_animation_params.

def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/animation.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")

def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

def validate_animation_params(params: Dict[str, Any]) -> None:
    """
    Rejects animation parameters the render stage cannot work with.

    Raises:
        ValueError: If a count or size is not positive, or the duration
            is negative.
    """
    problems = []
    if int(params['num_points']) <= 0:
        problems.append(f"num_points must be positive, got {params['num_points']}")
    for key in ('point_width', 'stage_width', 'stage_height'):
        if params[key] <= 0:
            problems.append(f"{key} must be positive, got {params[key]}")
    if params['duration'] < 0:
        problems.append(f"duration must not be negative, got {params['duration']}")
    for key in ('start_spread', 'end_spread'):
        if params[key] < 0:
            problems.append(f"{key} must not be negative, got {params[key]}")

    if problems:
        msg = "Configuration error: " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ValueError(msg)

def animation_params(config: Dict[str, Any]) -> Dict[str, Any]:
    """Returns the validated "animation" section, filled with defaults."""
    params = {
        'num_points': DEFAULT_NUM_POINTS,
        'point_width': DEFAULT_POINT_WIDTH,
        'stage_width': DEFAULT_STAGE_WIDTH,
        'stage_height': DEFAULT_STAGE_HEIGHT,
        'duration': DEFAULT_DURATION_MS,
        'seed': DEFAULT_SEED,
        'start_spread': DEFAULT_START_SPREAD,
        'end_spread': DEFAULT_END_SPREAD,
    }
    params.update(config.get('animation', {}))
    validate_animation_params(params)
    return params
