"""Core PID controller components."""

from pid_loop.core.pid_controller import PIDController, PIDTerms
from pid_loop.core.pid_params import PIDParams, PIDPresets
from pid_loop.core.filters import LowPassFilter

__all__ = [
    "PIDController",
    "PIDTerms",
    "PIDParams",
    "PIDPresets",
    "LowPassFilter",
]
