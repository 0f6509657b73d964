"""
Validation utilities for configuration checking.
Every failure is reported as InvalidConfig with a clear message.
"""

from typing import Optional
import math
import numbers


class InvalidConfig(ValueError):
    """Raised when a controller, plant or simulation is misconfigured."""
    pass


def validate_real(value: float, name: str) -> float:
    """
    Validate that a value is a finite real number.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value as float

    Raises:
        InvalidConfig: If value is not a finite real number
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfig(f"{name} must be a real number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise InvalidConfig(f"{name} must be finite, got {value}")
    return float(value)


def validate_positive(value: float, name: str) -> float:
    """
    Validate that a value is strictly positive.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        InvalidConfig: If value is not positive
    """
    value = validate_real(value, name)
    if value <= 0:
        raise InvalidConfig(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, name: str) -> float:
    """
    Validate that a value is non-negative (>= 0).

    Raises:
        InvalidConfig: If value is negative
    """
    value = validate_real(value, name)
    if value < 0:
        raise InvalidConfig(f"{name} must be non-negative, got {value}")
    return value


def validate_range(
    value: float,
    name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    min_inclusive: bool = True,
    max_inclusive: bool = True
) -> float:
    """
    Validate that a value falls within a specified range.

    Args:
        value: The value to validate
        name: Parameter name for error messages
        min_val: Minimum allowed value (None for no lower bound)
        max_val: Maximum allowed value (None for no upper bound)
        min_inclusive: Whether the lower bound is inclusive
        max_inclusive: Whether the upper bound is inclusive

    Returns:
        The validated value

    Raises:
        InvalidConfig: If value is outside the range
    """
    value = validate_real(value, name)

    if min_val is not None:
        if min_inclusive and value < min_val:
            raise InvalidConfig(f"{name} must be >= {min_val}, got {value}")
        elif not min_inclusive and value <= min_val:
            raise InvalidConfig(f"{name} must be > {min_val}, got {value}")

    if max_val is not None:
        if max_inclusive and value > max_val:
            raise InvalidConfig(f"{name} must be <= {max_val}, got {value}")
        elif not max_inclusive and value >= max_val:
            raise InvalidConfig(f"{name} must be < {max_val}, got {value}")

    return value


def validate_limits(lower: float, upper: float, name: str = "output") -> None:
    """Validate that a (min, max) pair is strictly ordered."""
    lower = validate_real(lower, f"{name}_min")
    upper = validate_real(upper, f"{name}_max")
    if lower >= upper:
        raise InvalidConfig(
            f"{name}_min must be less than {name}_max, got [{lower}, {upper}]"
        )
