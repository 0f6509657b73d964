"""
Signal filtering for the derivative path of the PID controller.
"""

from abc import ABC, abstractmethod

from pid_loop.utils.validators import validate_range


class BaseFilter(ABC):
    """Abstract base class for all filters."""

    @abstractmethod
    def update(self, value: float) -> float:
        """Update filter with new value and return filtered output."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset filter state."""
        pass

    @property
    @abstractmethod
    def output(self) -> float:
        """Current filter output."""
        pass


class LowPassFilter(BaseFilter):
    """
    Single-pole IIR low-pass filter.

    y[k] = (1 - alpha) * y[k-1] + alpha * x[k]

    The state starts at zero rather than at the first sample, so a
    filtered derivative ramps in from rest. Smaller alpha means heavier
    smoothing and more phase lag; alpha = 1 passes the input through.
    """

    def __init__(self, alpha: float = 0.1):
        self._alpha = validate_range(
            alpha, "filter_alpha", min_val=0.0, max_val=1.0, min_inclusive=False
        )
        self._output: float = 0.0

    def update(self, value: float) -> float:
        self._output = self._output * (1 - self._alpha) + value * self._alpha
        return self._output

    def reset(self) -> None:
        self._output = 0.0

    @property
    def output(self) -> float:
        return self._output

    @property
    def alpha(self) -> float:
        return self._alpha
