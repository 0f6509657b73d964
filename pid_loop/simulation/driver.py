"""
Fixed-timestep driver for the closed loop.

Wall-clock time is collected in an accumulator and drained in whole
simulation steps, so the integration step never depends on how often
the caller ticks.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional

from pid_loop.core.pid_controller import PIDController
from pid_loop.plants.mechanical import MechanicalPlant
from pid_loop.utils.validators import InvalidConfig, validate_positive, validate_real


DEFAULT_TIMESTEP = 0.04  # seconds
DISTURBANCE_FORCE = -30.0  # step disturbance used by the demos
STEP_TOLERANCE = 1e-9  # fraction of a timestep


@dataclass(frozen=True)
class StepRecord:
    """Loop signals after one fixed step."""
    time: float
    setpoint: float
    position: float
    velocity: float
    output: float
    proportional: float
    integral: float
    derivative: float
    error: float
    disturbance: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class FixedStepDriver:
    """
    Runs controller and plant in lock-step at a fixed timestep.

    Each step reads the plant position, feeds it to the controller with the
    current setpoint, then applies the controller output to the plant. The
    driver is the only writer of controller and plant state.

    Example:
        >>> driver = FixedStepDriver(controller, plant, timestep=0.04, setpoint=80.0)
        >>> records = driver.advance(0.1)  # two steps, 0.02 s carried over
    """

    def __init__(
        self,
        controller: PIDController,
        plant: MechanicalPlant,
        timestep: float = DEFAULT_TIMESTEP,
        setpoint: float = 0.0
    ):
        self._controller = controller
        self._plant = plant
        self._dt = validate_positive(timestep, "timestep")
        self._setpoint = validate_real(setpoint, "setpoint")

        self._accumulator: float = 0.0
        self._last_tick: Optional[float] = None
        self._steps: int = 0

    @property
    def controller(self) -> PIDController:
        return self._controller

    @property
    def plant(self) -> MechanicalPlant:
        return self._plant

    @property
    def timestep(self) -> float:
        return self._dt

    @property
    def setpoint(self) -> float:
        return self._setpoint

    @property
    def accumulator(self) -> float:
        """Wall time owed but not yet simulated."""
        return self._accumulator

    @property
    def steps(self) -> int:
        """Number of fixed steps executed since construction or reset."""
        return self._steps

    @property
    def time(self) -> float:
        """Simulated time in seconds."""
        return self._steps * self._dt

    def set_setpoint(self, value: float) -> None:
        self._setpoint = validate_real(value, "setpoint")

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        self._controller.set_gains(kp, ki, kd)

    def set_disturbance(self, value: float) -> None:
        self._plant.set_disturbance(value)

    def step(self) -> StepRecord:
        """Advance the loop by exactly one timestep."""
        measured = self._plant.position
        output = self._controller.update(self._setpoint, measured, self._dt)
        position, velocity = self._plant.update(output, self._dt)
        self._steps += 1

        terms = self._controller.terms
        return StepRecord(
            time=self.time,
            setpoint=self._setpoint,
            position=position,
            velocity=velocity,
            output=output,
            proportional=terms.proportional,
            integral=terms.integral,
            derivative=terms.derivative,
            error=terms.error,
            disturbance=self._plant.disturbance,
        )

    def advance(self, elapsed: float) -> List[StepRecord]:
        """
        Add elapsed wall time and run every whole step that is now owed.

        Args:
            elapsed: Seconds since the previous call

        Returns:
            One record per executed step, possibly empty
        """
        elapsed = validate_real(elapsed, "elapsed")
        if elapsed < 0:
            raise InvalidConfig(f"elapsed must be non-negative, got {elapsed}")

        self._accumulator += elapsed
        # A remainder within rounding error of dt counts as a whole step
        owed = int((self._accumulator + STEP_TOLERANCE * self._dt) // self._dt)
        records = [self.step() for _ in range(owed)]
        self._accumulator = max(0.0, self._accumulator - owed * self._dt)
        return records

    def tick(self, now: float) -> List[StepRecord]:
        """
        Advance to a wall-clock timestamp.

        The first call only records the timestamp. A clock that goes
        backwards is treated as no elapsed time.
        """
        if self._last_tick is None:
            self._last_tick = now
            return []
        elapsed = max(0.0, now - self._last_tick)
        self._last_tick = now
        return self.advance(elapsed)

    def reset(self) -> None:
        """Reset controller and plant transients and the clocks."""
        self._controller.reset()
        self._plant.reset()
        self._accumulator = 0.0
        self._last_tick = None
        self._steps = 0
