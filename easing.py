# easing.py
"""
Easing functions that map normalized time progress to visual progress.

The functions are written as plain Python so they can be called directly
and also compiled by Numba for the per-particle interpolation kernel.
"""
from numba import jit

# --- Data Contracts ---
#
# ease_cubic_in_out(t: float) -> float:
#   - Inputs: t >= 0, nominally in [0, 1] but may exceed 1 due to
#     frame-timing slop.
#   - Outputs: eased progress in [0, 1]. ease(0) == 0, ease(1) == 1.
#   - Invariants: Monotonically non-decreasing. Never exceeds 1.0.
#
# compute_progress(elapsed: float, duration: float) -> float:
#   - Inputs: elapsed >= 0 and duration >= 0, same time unit.
#   - Outputs: 1.0 when duration == 0, otherwise
#     ease_cubic_in_out(elapsed / duration).

def ease_cubic_in_out(t: float) -> float:
    """Cubic ease in/out, clamped so timing overshoot never extrapolates."""
    t = t * 2.0
    if t <= 1.0:
        t = t * t * t / 2.0
    else:
        t -= 2.0
        t = (t * t * t + 2.0) / 2.0

    if t > 1.0:
        t = 1.0
    return t

def compute_progress(elapsed: float, duration: float) -> float:
    """Eased progress for a cycle; a zero duration jumps to the end state."""
    if duration == 0.0:
        return 1.0
    return ease_cubic_in_out(elapsed / duration)

# Compiled twins used from inside other nopython functions.
ease_cubic_in_out_numba = jit(nopython=True)(ease_cubic_in_out)

@jit(nopython=True)
def compute_progress_numba(elapsed, duration):
    if duration == 0.0:
        return 1.0
    return ease_cubic_in_out_numba(elapsed / duration)
