"""
Linearised closed-loop analysis using the python-control library.

The discrete loop is approximated in continuous time: the plant becomes
1 / (m s^2 + b s) (the constant load only shifts the operating point) and
the derivative filter becomes a first-order lag with time constant
dt * (1 - alpha) / alpha. Saturation is ignored.
"""

from typing import Dict, Any
import numpy as np
import control as ct

from pid_loop.plants.mechanical import PlantParams
from pid_loop.core.pid_params import PIDParams
from pid_loop.utils.validators import validate_positive, validate_range


class ControlSystemAnalyzer:
    """Analyze the positioning loop using python-control."""

    @staticmethod
    def plant_transfer_function(params: PlantParams) -> ct.TransferFunction:
        """Position response to force: G(s) = 1 / (m s^2 + b s)."""
        return ct.tf([1.0], [params.inertia, params.friction_coefficient, 0.0])

    @staticmethod
    def derivative_time_constant(alpha: float, dt: float) -> float:
        """Continuous time constant equivalent to the discrete derivative filter."""
        alpha = validate_range(alpha, "filter_alpha", min_val=0.0, max_val=1.0, min_inclusive=False)
        dt = validate_positive(dt, "dt")
        return dt * (1.0 - alpha) / alpha

    @staticmethod
    def pid_transfer_function(kp: float, ki: float, kd: float,
                              tau: float = 0.0) -> ct.TransferFunction:
        """
        PID transfer function with filtered derivative.

        C(s) = Kp + Ki/s + Kd*s/(1 + tau*s)
        """
        s = ct.tf('s')
        controller = kp + ki / s if ki != 0 else ct.tf([kp], [1.0])
        if kd != 0:
            controller = controller + kd * s / (1 + tau * s)
        return controller

    @classmethod
    def closed_loop(cls, plant_params: PlantParams, pid_params: PIDParams,
                    dt: float) -> ct.TransferFunction:
        """
        Setpoint-to-position transfer function.

        With derivative on measurement only the PI part sees the setpoint,
        while the full PID sits in the feedback path:
        T(s) = C_pi * G / (1 + C_pid * G).
        """
        plant = cls.plant_transfer_function(plant_params)
        tau = cls.derivative_time_constant(pid_params.filter_alpha, dt)
        c_pi = cls.pid_transfer_function(pid_params.kp, pid_params.ki, 0.0)
        c_pid = cls.pid_transfer_function(pid_params.kp, pid_params.ki, pid_params.kd, tau)
        return ct.minreal(c_pi * ct.feedback(plant, c_pid), verbose=False)

    @staticmethod
    def poles(sys: ct.TransferFunction) -> np.ndarray:
        return np.asarray(ct.poles(sys))

    @classmethod
    def is_stable(cls, sys: ct.TransferFunction) -> bool:
        """Check if all poles lie in the open left half-plane."""
        return bool(np.all(np.real(cls.poles(sys)) < 0))

    @classmethod
    def damping_ratios(cls, sys: ct.TransferFunction) -> np.ndarray:
        """Damping ratio of each pole, -Re(p) / |p|."""
        poles = cls.poles(sys)
        magnitudes = np.abs(poles)
        ratios = np.ones(len(poles))
        nonzero = magnitudes > 0
        ratios[nonzero] = -np.real(poles[nonzero]) / magnitudes[nonzero]
        return ratios

    @classmethod
    def analyze_closed_loop(cls, plant_params: PlantParams, pid_params: PIDParams,
                            dt: float) -> Dict[str, Any]:
        """Complete closed-loop summary."""
        cl_sys = cls.closed_loop(plant_params, pid_params, dt)
        ratios = cls.damping_ratios(cl_sys)
        return {
            'closed_loop_tf': cl_sys,
            'poles': cls.poles(cl_sys),
            'is_stable': cls.is_stable(cl_sys),
            'dc_gain': float(np.real(ct.dcgain(cl_sys))),
            'min_damping_ratio': float(np.min(ratios)) if len(ratios) else 1.0,
        }
