"""
Performance metrics for closed-loop responses.
Uses numpy for vectorized calculations.
"""

from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, asdict
import numpy as np
from numpy.typing import ArrayLike

from pid_loop.utils.math_utils import integrate_trapezoid, rms, sign_changes


@dataclass
class StepResponseMetrics:
    """Metrics from step response analysis."""
    rise_time: float
    settling_time_2pct: float
    settling_time_5pct: float
    overshoot_percent: float
    peak_time: float
    peak_value: float
    steady_state_value: float
    steady_state_error: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ErrorMetrics:
    """Error-based performance metrics."""
    iae: float
    ise: float
    itae: float
    mae: float
    rmse: float
    max_error: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class ControlEffortMetrics:
    """Metrics related to control effort."""
    total_variation: float
    max_absolute: float
    saturated_fraction: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def error_sign_changes(errors: ArrayLike, tolerance: float = 0.0) -> int:
    """Number of times the tracking error changes sign."""
    return sign_changes(errors, tolerance)


def first_crossing_overshoot(setpoints: ArrayLike, positions: ArrayLike) -> float:
    """
    Largest excursion past the setpoint after the error first changes sign.

    The value is measured in the direction of travel, so it is positive
    whenever the response overshoots. Returns 0.0 when the error never
    crosses zero.
    """
    errors = np.asarray(setpoints, dtype=float) - np.asarray(positions, dtype=float)
    nonzero = np.flatnonzero(errors)
    if len(nonzero) == 0:
        return 0.0

    initial_sign = np.sign(errors[nonzero[0]])
    crossed = np.flatnonzero(np.sign(errors) == -initial_sign)
    if len(crossed) == 0:
        return 0.0

    return float(np.max(-initial_sign * errors[crossed[0]:]))


class PerformanceMetrics:
    """Performance metrics calculator."""

    def calculate_step_response_metrics(
        self,
        timestamps: np.ndarray,
        setpoints: np.ndarray,
        positions: np.ndarray,
        initial_value: Optional[float] = None
    ) -> StepResponseMetrics:
        """Calculate step response metrics against the final setpoint."""
        if len(timestamps) < 2:
            raise ValueError("Need at least 2 data points")

        timestamps = np.asarray(timestamps, dtype=float)
        positions = np.asarray(positions, dtype=float)
        final_setpoint = float(setpoints[-1])
        y0 = initial_value if initial_value is not None else float(positions[0])
        delta = final_setpoint - y0

        n_ss = max(1, len(positions) // 10)
        steady_state_value = float(np.mean(positions[-n_ss:]))

        if abs(delta) < 1e-10:
            return StepResponseMetrics(
                rise_time=0.0, settling_time_2pct=0.0, settling_time_5pct=0.0,
                overshoot_percent=0.0, peak_time=0.0,
                peak_value=float(positions[-1]),
                steady_state_value=steady_state_value,
                steady_state_error=final_setpoint - steady_state_value
            )

        y_norm = (positions - y0) / delta

        # Rise time 10% -> 90%, first crossings
        t_10 = self._first_crossing_time(timestamps, y_norm, 0.1)
        t_90 = self._first_crossing_time(timestamps, y_norm, 0.9)
        rise_time = max(0.0, t_90 - t_10)

        settling_2pct = self._find_settling_time(timestamps, positions, final_setpoint, delta, 0.02)
        settling_5pct = self._find_settling_time(timestamps, positions, final_setpoint, delta, 0.05)

        peak_idx = int(np.argmax(y_norm))
        overshoot = max(0.0, (y_norm[peak_idx] - 1.0) * 100)

        return StepResponseMetrics(
            rise_time=rise_time,
            settling_time_2pct=settling_2pct,
            settling_time_5pct=settling_5pct,
            overshoot_percent=float(overshoot),
            peak_time=float(timestamps[peak_idx]),
            peak_value=float(positions[peak_idx]),
            steady_state_value=steady_state_value,
            steady_state_error=final_setpoint - steady_state_value
        )

    @staticmethod
    def _first_crossing_time(timestamps: np.ndarray, y_norm: np.ndarray, level: float) -> float:
        above = np.flatnonzero(y_norm >= level)
        if len(above) == 0:
            return float(timestamps[-1])
        return float(timestamps[above[0]])

    @staticmethod
    def _find_settling_time(timestamps: np.ndarray, positions: np.ndarray,
                            final_value: float, delta: float, tolerance: float) -> float:
        """Time after which the response stays within the band around final_value."""
        band = tolerance * abs(delta)
        outside = np.flatnonzero(np.abs(positions - final_value) > band)
        if len(outside) == 0:
            return float(timestamps[0])
        if outside[-1] == len(timestamps) - 1:
            return float('inf')
        return float(timestamps[outside[-1] + 1])

    def calculate_error_metrics(self, timestamps: np.ndarray, setpoints: np.ndarray,
                                positions: np.ndarray) -> ErrorMetrics:
        """Calculate integral and statistical error metrics."""
        if len(timestamps) < 2:
            raise ValueError("Need at least 2 data points")

        timestamps = np.asarray(timestamps, dtype=float)
        errors = np.asarray(setpoints, dtype=float) - np.asarray(positions, dtype=float)
        abs_errors = np.abs(errors)

        return ErrorMetrics(
            iae=integrate_trapezoid(abs_errors, timestamps),
            ise=integrate_trapezoid(errors ** 2, timestamps),
            itae=integrate_trapezoid(timestamps * abs_errors, timestamps),
            mae=float(np.mean(abs_errors)),
            rmse=rms(errors),
            max_error=float(np.max(abs_errors))
        )

    def calculate_control_effort_metrics(self, outputs: np.ndarray,
                                         output_limits: Optional[Tuple[float, float]] = None
                                         ) -> ControlEffortMetrics:
        """Calculate control effort metrics."""
        outputs = np.asarray(outputs, dtype=float)
        if len(outputs) < 2:
            raise ValueError("Need at least 2 data points")

        saturated_fraction = 0.0
        if output_limits is not None:
            at_limits = (outputs <= output_limits[0]) | (outputs >= output_limits[1])
            saturated_fraction = float(np.mean(at_limits))

        return ControlEffortMetrics(
            total_variation=float(np.sum(np.abs(np.diff(outputs)))),
            max_absolute=float(np.max(np.abs(outputs))),
            saturated_fraction=saturated_fraction
        )

    def calculate_all_metrics(self, timestamps: np.ndarray, setpoints: np.ndarray,
                              positions: np.ndarray, outputs: np.ndarray,
                              output_limits: Optional[Tuple[float, float]] = None) -> Dict[str, Any]:
        """Calculate all available metrics."""
        errors = np.asarray(setpoints, dtype=float) - np.asarray(positions, dtype=float)
        return {
            'step_response': self.calculate_step_response_metrics(timestamps, setpoints, positions).to_dict(),
            'error': self.calculate_error_metrics(timestamps, setpoints, positions).to_dict(),
            'control_effort': self.calculate_control_effort_metrics(outputs, output_limits).to_dict(),
            'error_sign_changes': error_sign_changes(errors),
            'first_crossing_overshoot': first_crossing_overshoot(setpoints, positions),
        }
