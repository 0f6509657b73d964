"""Plant model for simulation and testing."""

from pid_loop.plants.mechanical import MechanicalPlant, PlantParams, PlantPresets

__all__ = [
    "MechanicalPlant",
    "PlantParams",
    "PlantPresets",
]
