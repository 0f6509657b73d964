"""Analysis and visualization of closed-loop runs."""

from pid_loop.analyzer.metrics import (
    PerformanceMetrics,
    StepResponseMetrics,
    ErrorMetrics,
    ControlEffortMetrics,
    error_sign_changes,
    first_crossing_overshoot,
)
from pid_loop.analyzer.control_analysis import ControlSystemAnalyzer
from pid_loop.analyzer.plots import SimulationPlotter

__all__ = [
    "PerformanceMetrics",
    "StepResponseMetrics",
    "ErrorMetrics",
    "ControlEffortMetrics",
    "error_sign_changes",
    "first_crossing_overshoot",
    "ControlSystemAnalyzer",
    "SimulationPlotter",
]
