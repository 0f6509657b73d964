"""
Discrete PID Controller Implementation.

Features:
- Proportional, Integral, Derivative control
- Derivative on measurement (avoids derivative kick)
- Single-pole low-pass filtering of the derivative term
- Conditional-integration anti-windup
- Output saturation
- Live gain changes without disturbing the integral
"""

from typing import Dict, Any
from dataclasses import dataclass, asdict

from pid_loop.core.pid_params import PIDParams
from pid_loop.core.filters import LowPassFilter
from pid_loop.utils.math_utils import clamp


@dataclass(frozen=True)
class PIDTerms:
    """Snapshot of the controller after an update, for display."""
    output: float = 0.0
    proportional: float = 0.0
    integral: float = 0.0
    derivative: float = 0.0
    error: float = 0.0
    saturated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary."""
        return asdict(self)


class PIDController:
    """
    Discrete positional PID controller.

    The derivative acts on the measured value rather than on the error, so
    a setpoint jump never produces a derivative spike. The integral only
    accumulates while the unsaturated output lies strictly inside the
    output limits.

    Example:
        >>> pid = PIDController(kp=1.5, ki=0.5, kd=3.5)
        >>> output = pid.update(setpoint=80.0, measured_value=0.0, dt=0.04)
        >>> pid.terms.proportional
        120.0
    """

    def __init__(
        self,
        kp: float = 1.0,
        ki: float = 0.0,
        kd: float = 0.0,
        output_min: float = -100.0,
        output_max: float = 100.0,
        filter_alpha: float = 0.1
    ):
        """
        Initialize PID controller.

        Args:
            kp: Proportional gain
            ki: Integral gain
            kd: Derivative gain
            output_min: Lower output clamp
            output_max: Upper output clamp
            filter_alpha: Derivative filter coefficient in (0, 1]

        Raises:
            InvalidConfig: If the limits are inverted or alpha is out of range
        """
        self._params = PIDParams(
            kp=kp, ki=ki, kd=kd,
            output_min=output_min,
            output_max=output_max,
            filter_alpha=filter_alpha
        )

        # Internal state
        self._proportional: float = 0.0
        self._integral: float = 0.0
        self._last_measured: float = 0.0
        self._error: float = 0.0

        self._derivative_filter = LowPassFilter(alpha=self._params.filter_alpha)

    @classmethod
    def from_params(cls, params: PIDParams) -> 'PIDController':
        """Build a controller from a parameter set."""
        return cls(
            kp=params.kp, ki=params.ki, kd=params.kd,
            output_min=params.output_min,
            output_max=params.output_max,
            filter_alpha=params.filter_alpha
        )

    @property
    def params(self) -> PIDParams:
        """Get current parameters."""
        return self._params

    @property
    def kp(self) -> float:
        return self._params.kp

    @property
    def ki(self) -> float:
        return self._params.ki

    @property
    def kd(self) -> float:
        return self._params.kd

    @property
    def output_min(self) -> float:
        return self._params.output_min

    @property
    def output_max(self) -> float:
        return self._params.output_max

    @property
    def filter_alpha(self) -> float:
        return self._params.filter_alpha

    @property
    def proportional_term(self) -> float:
        return self._proportional

    @property
    def integral_term(self) -> float:
        return self._integral

    @property
    def derivative_term(self) -> float:
        return self._derivative_filter.output

    @property
    def output(self) -> float:
        """Saturated sum of the stored terms (the last returned output)."""
        return clamp(
            self._proportional + self._integral + self._derivative_filter.output,
            self._params.output_min,
            self._params.output_max
        )

    @property
    def terms(self) -> PIDTerms:
        """Immutable snapshot of the current terms."""
        unsat = self._proportional + self._integral + self._derivative_filter.output
        output = self.output
        return PIDTerms(
            output=output,
            proportional=self._proportional,
            integral=self._integral,
            derivative=self._derivative_filter.output,
            error=self._error,
            saturated=output != unsat
        )

    def update(self, setpoint: float, measured_value: float, dt: float) -> float:
        """
        Advance the controller by one step.

        Args:
            setpoint: Desired value (SP)
            measured_value: Measured process variable (PV)
            dt: Time since the previous update in seconds

        Returns:
            Control output clamped to [output_min, output_max]. A
            non-positive dt returns the previous output and leaves all
            state untouched.
        """
        if dt <= 0:
            return self.output

        p = self._params
        error = setpoint - measured_value

        self._proportional = p.kp * error

        # Derivative on measurement, low-pass filtered
        measured_derivative = (measured_value - self._last_measured) / dt
        self._derivative_filter.update(-p.kd * measured_derivative)

        # Integrate only while the candidate output is unsaturated,
        # using the integral from the previous step
        candidate = self._proportional + self._integral + self._derivative_filter.output
        if p.output_min < candidate < p.output_max:
            self._integral += p.ki * error * dt

        self._last_measured = measured_value
        self._error = error

        return self.output

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        """
        Overwrite all three gains.

        Takes effect on the next update. Accumulated integral and
        derivative state are kept, so retuning is bumpless.
        """
        self._params = self._params.copy(kp=kp, ki=ki, kd=kd)

    def reset(self) -> None:
        """Zero the integral, derivative memory and terms; keep gains and limits."""
        self._proportional = 0.0
        self._integral = 0.0
        self._last_measured = 0.0
        self._error = 0.0
        self._derivative_filter.reset()

    def get_state(self) -> Dict[str, Any]:
        """Get controller state as dictionary."""
        state = self.terms.to_dict()
        state['last_measured_value'] = self._last_measured
        return state

    def __repr__(self) -> str:
        return f"PIDController({self._params})"
