"""
Single-degree-of-freedom mechanical plant.
Equation of motion: m * x'' = u + d - b * x' - L
"""

from dataclasses import dataclass
from typing import Dict, Any, Tuple
import json

from pid_loop.utils.validators import (
    InvalidConfig,
    validate_positive,
    validate_non_negative,
    validate_real,
)


@dataclass
class PlantParams:
    """Physical parameters of the mechanical plant."""

    inertia: float = 1.0  # Resistance to acceleration (mass)
    friction_coefficient: float = 0.2  # Linear viscous drag
    constant_load: float = 20.0  # Opposing force, e.g. gravity
    initial_position: float = 0.0

    def __post_init__(self):
        self.inertia = validate_positive(self.inertia, "inertia")
        self.friction_coefficient = validate_non_negative(
            self.friction_coefficient, "friction_coefficient"
        )
        self.constant_load = validate_real(self.constant_load, "constant_load")
        self.initial_position = validate_real(self.initial_position, "initial_position")

    def copy(self, **changes) -> 'PlantParams':
        """Create a copy with optional parameter changes."""
        params = self.to_dict()
        params.update(changes)
        return PlantParams(**params)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'inertia': self.inertia,
            'friction_coefficient': self.friction_coefficient,
            'constant_load': self.constant_load,
            'initial_position': self.initial_position,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlantParams':
        unknown = set(data) - set(cls().to_dict())
        if unknown:
            raise InvalidConfig(f"Unknown plant parameters: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'PlantParams':
        return cls.from_dict(json.loads(json_str))


class PlantPresets:
    """Common plant configurations."""

    @staticmethod
    def default() -> PlantParams:
        """Unit mass with light friction lifting a constant load of 20."""
        return PlantParams(inertia=1.0, friction_coefficient=0.2, constant_load=20.0)

    @staticmethod
    def frictionless() -> PlantParams:
        """Unit mass with no friction and no load."""
        return PlantParams(inertia=1.0, friction_coefficient=0.0, constant_load=0.0)


class MechanicalPlant:
    """
    Mass driven by a control force against friction, a constant load and
    an injectable disturbance.

    Integration is explicit Euler on velocity followed by a position update
    with the new velocity. Accuracy degrades when dt is large compared with
    the inertia/friction time constant.

    Example:
        >>> plant = MechanicalPlant(inertia=1.0, friction_coefficient=0.2,
        ...                         constant_load=20.0)
        >>> position, velocity = plant.update(control_output=20.0, dt=0.04)
    """

    def __init__(
        self,
        inertia: float,
        friction_coefficient: float,
        constant_load: float,
        initial_position: float = 0.0
    ):
        """
        Initialize mechanical plant.

        Args:
            inertia: Mass of the moving body, must be positive
            friction_coefficient: Viscous friction, must be non-negative
            constant_load: Constant force opposing the control output
            initial_position: Starting position

        Raises:
            InvalidConfig: If inertia <= 0 or friction is negative
        """
        self._params = PlantParams(
            inertia=inertia,
            friction_coefficient=friction_coefficient,
            constant_load=constant_load,
            initial_position=initial_position
        )

        # State variables
        self._position: float = self._params.initial_position
        self._velocity: float = 0.0
        self._disturbance: float = 0.0

    @classmethod
    def from_params(cls, params: PlantParams) -> 'MechanicalPlant':
        """Build a plant from a parameter set."""
        return cls(
            inertia=params.inertia,
            friction_coefficient=params.friction_coefficient,
            constant_load=params.constant_load,
            initial_position=params.initial_position
        )

    def update(self, control_output: float, dt: float) -> Tuple[float, float]:
        """
        Integrate the equation of motion over one step.

        Args:
            control_output: Force applied by the controller
            dt: Step length in seconds (0 leaves the state unchanged)

        Returns:
            Updated (position, velocity)
        """
        p = self._params
        net_force = (
            control_output
            + self._disturbance
            - p.friction_coefficient * self._velocity
            - p.constant_load
        )
        acceleration = net_force / p.inertia

        self._velocity += acceleration * dt
        self._position += self._velocity * dt

        return self._position, self._velocity

    def set_disturbance(self, value: float) -> None:
        """
        Set the external disturbance force.

        Args:
            value: Force added to the net force from the next update on
        """
        self._disturbance = float(value)

    def reset(self) -> None:
        """Zero velocity and disturbance. Position is kept."""
        self._velocity = 0.0
        self._disturbance = 0.0

    def reposition(self, position: float) -> None:
        """Place the mass at rest at a new position."""
        self._position = validate_real(position, "position")
        self._velocity = 0.0

    def equilibrium_force(self) -> float:
        """Control output that holds the mass at rest with no disturbance."""
        return self._params.constant_load

    @property
    def params(self) -> PlantParams:
        return self._params

    @property
    def position(self) -> float:
        """Current position (the process variable)."""
        return self._position

    @property
    def velocity(self) -> float:
        return self._velocity

    @property
    def disturbance(self) -> float:
        return self._disturbance

    @property
    def inertia(self) -> float:
        return self._params.inertia

    @property
    def friction_coefficient(self) -> float:
        return self._params.friction_coefficient

    @property
    def constant_load(self) -> float:
        return self._params.constant_load

    def get_state(self) -> Dict[str, Any]:
        """Get current plant state as dictionary."""
        return {
            'position': self._position,
            'velocity': self._velocity,
            'disturbance': self._disturbance,
        }

    def get_info(self) -> Dict[str, Any]:
        """Get plant parameters."""
        info = {'type': 'MechanicalPlant'}
        info.update(self._params.to_dict())
        return info

    def __repr__(self) -> str:
        return (
            f"MechanicalPlant(inertia={self.inertia}, "
            f"friction={self.friction_coefficient}, load={self.constant_load})"
        )
