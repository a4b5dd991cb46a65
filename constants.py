# constants.py
"""
Application-level constants.

These values are static and do not change between animation runs.
They are fundamental to the application's framework, such as rendering
properties, the default stage size, or the shape of the generated
particle distribution. Anything listed under DEFAULT_* can be overridden
from config.json.
"""

# --- Animation defaults (overridable via the "animation" config section) ---
DEFAULT_NUM_POINTS = 100000
# On-screen size of a point, in pixels.
DEFAULT_POINT_WIDTH = 2
# Stage dimensions, in pixels. Must match the drawing surface.
DEFAULT_STAGE_WIDTH = 500
DEFAULT_STAGE_HEIGHT = 500
# Length of one cycle, in milliseconds. 0 shows the end state immediately.
DEFAULT_DURATION_MS = 1500
DEFAULT_SEED = 42

# --- Particle distribution ---
# Standard deviation of the jitter around the start ring (narrow).
DEFAULT_START_SPREAD = 0.05
# Standard deviation of the end scatter (~3x wider than the start jitter).
DEFAULT_END_SPREAD = 0.15
# The start ring radius is stage_size / RING_DIVISOR.
RING_DIVISOR = 2.5
# Blue channel of every end color; its green channel is half the start green.
END_COLOR_BLUE = 0.9
END_COLOR_GREEN_SCALE = 0.5

# --- Rendering ---
FPS = 60
WINDOW_TITLE = "Particle Tween"
# Transparent black, depth reset to the far plane.
CLEAR_COLOR = (0.0, 0.0, 0.0, 0.0)
CLEAR_DEPTH = 1.0

# --- Run control ---
DEFAULT_LOG_THROTTLE_FRAMES = 120
