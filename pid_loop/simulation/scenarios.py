"""
Simulation scenarios for the positioning loop.
Defines setpoint profiles and disturbance schedules.
"""

from typing import Callable, Optional
from dataclasses import dataclass

from pid_loop.simulation.driver import DEFAULT_TIMESTEP, DISTURBANCE_FORCE
from pid_loop.utils.validators import InvalidConfig, validate_positive, validate_non_negative


@dataclass
class SimulationScenario:
    """
    Defines a complete simulation scenario.

    The setpoint steps from ``setpoint_initial`` to ``setpoint_final`` at
    ``setpoint_time``. The disturbance force switches on at
    ``disturbance_time`` and stays on for ``disturbance_duration`` seconds,
    or for the rest of the run when the duration is None. Either profile
    can be replaced by a function of time.
    """

    name: str
    duration: float
    timestep: float = DEFAULT_TIMESTEP

    # Setpoint configuration
    setpoint_initial: float = 0.0
    setpoint_final: float = 80.0
    setpoint_time: float = 0.0
    setpoint_function: Optional[Callable[[float], float]] = None

    # Disturbance configuration
    disturbance_magnitude: float = 0.0
    disturbance_time: float = 0.0
    disturbance_duration: Optional[float] = None
    disturbance_function: Optional[Callable[[float], float]] = None

    def __post_init__(self):
        validate_positive(self.duration, "duration")
        validate_positive(self.timestep, "timestep")
        validate_non_negative(self.setpoint_time, "setpoint_time")
        validate_non_negative(self.disturbance_time, "disturbance_time")
        if self.disturbance_duration is not None:
            validate_positive(self.disturbance_duration, "disturbance_duration")
        if self.n_steps < 1:
            raise InvalidConfig(
                f"duration {self.duration} covers no whole timestep of {self.timestep}"
            )

    @property
    def n_steps(self) -> int:
        """Number of fixed steps covering the duration."""
        return int(round(self.duration / self.timestep))

    def get_setpoint(self, t: float) -> float:
        """
        Get setpoint value at time t.

        Args:
            t: Simulated time in seconds

        Returns:
            Setpoint value
        """
        if self.setpoint_function is not None:
            return self.setpoint_function(t)
        if t < self.setpoint_time:
            return self.setpoint_initial
        return self.setpoint_final

    def get_disturbance(self, t: float) -> float:
        """Get disturbance force at time t."""
        if self.disturbance_function is not None:
            return self.disturbance_function(t)
        if t < self.disturbance_time:
            return 0.0
        if (self.disturbance_duration is not None and
                t >= self.disturbance_time + self.disturbance_duration):
            return 0.0
        return self.disturbance_magnitude


class ScenarioLibrary:
    """Library of predefined scenarios."""

    @staticmethod
    def step_response(
        setpoint: float = 80.0,
        duration: float = 20.0,
        timestep: float = DEFAULT_TIMESTEP
    ) -> SimulationScenario:
        """Step from rest to the setpoint at t = 0."""
        return SimulationScenario(
            name="Step Response",
            duration=duration,
            timestep=timestep,
            setpoint_final=setpoint,
        )

    @staticmethod
    def disturbance_rejection(
        setpoint: float = 80.0,
        disturbance: float = DISTURBANCE_FORCE,
        disturbance_time: float = 10.0,
        duration: float = 30.0,
        timestep: float = DEFAULT_TIMESTEP
    ) -> SimulationScenario:
        """Reach the setpoint, then hold it against a persistent force step."""
        return SimulationScenario(
            name="Disturbance Rejection",
            duration=duration,
            timestep=timestep,
            setpoint_final=setpoint,
            disturbance_magnitude=disturbance,
            disturbance_time=disturbance_time,
        )

    @staticmethod
    def pulse_disturbance(
        setpoint: float = 80.0,
        disturbance: float = DISTURBANCE_FORCE,
        disturbance_time: float = 10.0,
        pulse_width: float = 1.0,
        duration: float = 30.0,
        timestep: float = DEFAULT_TIMESTEP
    ) -> SimulationScenario:
        """Short force pulse while holding the setpoint."""
        return SimulationScenario(
            name="Pulse Disturbance",
            duration=duration,
            timestep=timestep,
            setpoint_final=setpoint,
            disturbance_magnitude=disturbance,
            disturbance_time=disturbance_time,
            disturbance_duration=pulse_width,
        )

    @staticmethod
    def setpoint_change(
        initial: float = 40.0,
        final: float = 80.0,
        change_time: float = 15.0,
        duration: float = 30.0,
        timestep: float = DEFAULT_TIMESTEP
    ) -> SimulationScenario:
        """Settle at one setpoint, then jump to another."""
        return SimulationScenario(
            name="Setpoint Change",
            duration=duration,
            timestep=timestep,
            setpoint_initial=initial,
            setpoint_final=final,
            setpoint_time=change_time,
        )
