"""Simulation framework for the closed loop."""

from pid_loop.simulation.driver import (
    FixedStepDriver,
    StepRecord,
    DEFAULT_TIMESTEP,
    DISTURBANCE_FORCE,
)
from pid_loop.simulation.scenarios import SimulationScenario, ScenarioLibrary
from pid_loop.simulation.simulator import Simulator, SimulationResult

__all__ = [
    "FixedStepDriver",
    "StepRecord",
    "DEFAULT_TIMESTEP",
    "DISTURBANCE_FORCE",
    "SimulationScenario",
    "ScenarioLibrary",
    "Simulator",
    "SimulationResult",
]
