"""
PID Loop Simulator
==================

A fixed-timestep simulation of a discrete PID controller driving a
single-degree-of-freedom mechanical plant:
- PID controller with filtered derivative-on-measurement and anti-windup
- Mass/friction/load plant with injectable disturbance force
- Accumulator-based fixed-step driver
- Scenario simulation, metrics and plotting
"""

from pid_loop.core.pid_controller import PIDController, PIDTerms
from pid_loop.core.pid_params import PIDParams, PIDPresets
from pid_loop.plants.mechanical import MechanicalPlant, PlantParams, PlantPresets
from pid_loop.simulation.driver import FixedStepDriver, StepRecord
from pid_loop.simulation.simulator import Simulator, SimulationResult
from pid_loop.utils.validators import InvalidConfig

__version__ = "1.0.0"
__all__ = [
    "PIDController",
    "PIDTerms",
    "PIDParams",
    "PIDPresets",
    "MechanicalPlant",
    "PlantParams",
    "PlantPresets",
    "FixedStepDriver",
    "StepRecord",
    "Simulator",
    "SimulationResult",
    "InvalidConfig",
]
