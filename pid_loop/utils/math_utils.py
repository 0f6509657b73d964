"""
Mathematical utility functions for the control loop.
Uses numpy for array operations.
"""

import numpy as np
from numpy.typing import ArrayLike


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds."""
    return float(np.clip(value, min_val, max_val))


def sign_changes(values: ArrayLike, tolerance: float = 0.0) -> int:
    """
    Count sign reversals in a sequence.

    Samples with magnitude at or below ``tolerance`` are ignored so that
    a signal hovering on zero is not counted as oscillating.
    """
    arr = np.asarray(values, dtype=float)
    signs = np.sign(arr[np.abs(arr) > tolerance])
    if len(signs) < 2:
        return 0
    return int(np.count_nonzero(np.diff(signs)))


def rms(values: ArrayLike) -> float:
    """Compute root mean square using numpy."""
    arr = np.asarray(values, dtype=float)
    if len(arr) == 0:
        return 0.0
    return float(np.sqrt(np.mean(arr ** 2)))


def integrate_trapezoid(values: ArrayLike, x: ArrayLike) -> float:
    """Integrate samples over x with the trapezoid rule."""
    y = np.asarray(values, dtype=float)
    x = np.asarray(x, dtype=float)
    if len(y) < 2:
        return 0.0
    return float(np.sum((y[1:] + y[:-1]) * np.diff(x)) / 2.0)
