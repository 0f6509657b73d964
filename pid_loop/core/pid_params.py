"""
PID Controller Parameters Configuration.
Encapsulates the controller settings in a validated, serialisable structure.
"""

from dataclasses import dataclass
from typing import Dict, Any, List
import json

from pid_loop.utils.validators import (
    InvalidConfig,
    validate_real,
    validate_range,
    validate_limits,
)


@dataclass
class PIDParams:
    """
    PID Controller Parameters.

    Gains are the only values a running controller lets the shell change;
    limits and the derivative filter coefficient are fixed once the
    controller is built.
    """

    # Core gains
    kp: float = 1.0  # Proportional gain
    ki: float = 0.0  # Integral gain
    kd: float = 0.0  # Derivative gain

    # Output limits (saturation)
    output_min: float = -100.0
    output_max: float = 100.0

    # Derivative low-pass coefficient, in (0, 1]
    filter_alpha: float = 0.1

    def __post_init__(self):
        """Validate parameters after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all parameters."""
        self.kp = validate_real(self.kp, "kp")
        self.ki = validate_real(self.ki, "ki")
        self.kd = validate_real(self.kd, "kd")

        validate_limits(self.output_min, self.output_max, "output")
        self.output_min = float(self.output_min)
        self.output_max = float(self.output_max)

        self.filter_alpha = validate_range(
            self.filter_alpha, "filter_alpha",
            min_val=0.0, max_val=1.0, min_inclusive=False
        )

    def copy(self, **changes) -> 'PIDParams':
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New PIDParams instance
        """
        params = self.to_dict()
        params.update(changes)
        return PIDParams(**params)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'kp': self.kp,
            'ki': self.ki,
            'kd': self.kd,
            'output_min': self.output_min,
            'output_max': self.output_max,
            'filter_alpha': self.filter_alpha,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PIDParams':
        """Create from dictionary, rejecting unknown keys."""
        unknown = set(data) - set(cls().to_dict())
        if unknown:
            raise InvalidConfig(f"Unknown PID parameters: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'PIDParams':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return (
            f"PIDParams(Kp={self.kp:.4f}, Ki={self.ki:.4f}, Kd={self.kd:.4f}, "
            f"limits=[{self.output_min}, {self.output_max}], "
            f"alpha={self.filter_alpha})"
        )


class PIDPresets:
    """Gain presets for the mechanical positioning loop."""

    @staticmethod
    def p_only() -> PIDParams:
        """Proportional only; settles short of the setpoint under load."""
        return PIDParams(kp=1.0, ki=0.0, kd=0.0)

    @staticmethod
    def pi() -> PIDParams:
        """PI controller (no derivative)."""
        return PIDParams(kp=1.2, ki=0.4, kd=0.0)

    @staticmethod
    def pid_damped() -> PIDParams:
        """Well damped PID response."""
        return PIDParams(kp=1.5, ki=0.5, kd=3.5)

    @staticmethod
    def pid_oscillatory() -> PIDParams:
        """Aggressive gains with visible overshoot and ringing."""
        return PIDParams(kp=8.0, ki=2.0, kd=1.0)

    @classmethod
    def names(cls) -> List[str]:
        """Names accepted by get()."""
        return ['p_only', 'pi', 'pid_damped', 'pid_oscillatory']

    @classmethod
    def get(cls, name: str) -> PIDParams:
        """Look up a preset by name."""
        if name not in cls.names():
            raise InvalidConfig(
                f"Unknown preset '{name}', expected one of: {', '.join(cls.names())}"
            )
        return getattr(cls, name)()
