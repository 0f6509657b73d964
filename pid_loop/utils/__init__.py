"""Utility functions and helpers."""

from pid_loop.utils.validators import (
    InvalidConfig,
    validate_real,
    validate_positive,
    validate_non_negative,
    validate_range,
    validate_limits,
)
from pid_loop.utils.math_utils import clamp, sign_changes, rms, integrate_trapezoid

__all__ = [
    "InvalidConfig",
    "validate_real",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_limits",
    "clamp",
    "sign_changes",
    "rms",
    "integrate_trapezoid",
]
