"""
Closed-loop simulation framework.
Runs scenarios through the fixed-step driver and collects the results.
"""

from typing import Dict, Any, List, Optional
from dataclasses import dataclass
import numpy as np
import time

from pid_loop.core.pid_controller import PIDController
from pid_loop.core.pid_params import PIDParams, PIDPresets
from pid_loop.plants.mechanical import MechanicalPlant, PlantParams, PlantPresets
from pid_loop.simulation.driver import FixedStepDriver
from pid_loop.simulation.scenarios import SimulationScenario
from pid_loop.logging.csv_logger import CSVLogger
from pid_loop.analyzer.metrics import PerformanceMetrics
from pid_loop.analyzer.plots import SimulationPlotter


@dataclass
class SimulationResult:
    """Container for simulation results."""
    timestamps: np.ndarray
    setpoints: np.ndarray
    positions: np.ndarray
    velocities: np.ndarray
    outputs: np.ndarray
    errors: np.ndarray
    p_terms: np.ndarray
    i_terms: np.ndarray
    d_terms: np.ndarray
    disturbances: np.ndarray

    # Metadata
    scenario_name: str = ""
    controller_params: Optional[Dict[str, Any]] = None
    plant_info: Optional[Dict[str, Any]] = None
    execution_time: float = 0.0

    def to_dict(self) -> Dict[str, np.ndarray]:
        """Convert to dictionary format."""
        return {
            'time': self.timestamps,
            'setpoint': self.setpoints,
            'position': self.positions,
            'velocity': self.velocities,
            'output': self.outputs,
            'error': self.errors,
            'p_term': self.p_terms,
            'i_term': self.i_terms,
            'd_term': self.d_terms,
            'disturbance': self.disturbances,
        }

    @property
    def final_position(self) -> float:
        return float(self.positions[-1])

    @property
    def final_velocity(self) -> float:
        return float(self.velocities[-1])

    def __len__(self) -> int:
        return len(self.timestamps)


class Simulator:
    """
    Closed-loop simulation engine.

    Every run builds a fresh plant and controller, so runs are independent
    and reproducible.

    Example:
        >>> sim = Simulator(pid_params=PIDPresets.pid_damped())
        >>> result = sim.run(ScenarioLibrary.step_response())
        >>> metrics = sim.analyze(result)
    """

    def __init__(
        self,
        plant_params: Optional[PlantParams] = None,
        pid_params: Optional[PIDParams] = None,
        csv_log_path: Optional[str] = None
    ):
        """
        Initialize simulator.

        Args:
            plant_params: Plant parameters (default plant if None)
            pid_params: PID controller parameters (damped preset if None)
            csv_log_path: Optional path for per-step CSV logging
        """
        self._plant_params = plant_params or PlantPresets.default()
        self._params = pid_params or PIDPresets.pid_damped()
        self._csv_path = csv_log_path

        self._results: List[SimulationResult] = []
        self._metrics = PerformanceMetrics()
        self._plotter = SimulationPlotter()

    def run(self, scenario: SimulationScenario) -> SimulationResult:
        """
        Run a simulation scenario.

        Args:
            scenario: Simulation scenario to run

        Returns:
            SimulationResult containing one sample per step
        """
        start_time = time.perf_counter()

        plant = MechanicalPlant.from_params(self._plant_params)
        controller = PIDController.from_params(self._params)
        driver = FixedStepDriver(
            controller, plant,
            timestep=scenario.timestep,
            setpoint=scenario.get_setpoint(0.0)
        )

        records = []
        logger = CSVLogger(self._csv_path) if self._csv_path else None

        try:
            for i in range(scenario.n_steps):
                t = driver.time
                driver.set_setpoint(scenario.get_setpoint(t))
                driver.set_disturbance(scenario.get_disturbance(t))

                record = driver.step()
                records.append(record)

                if logger is not None:
                    logger.log_step(i, record)
        finally:
            if logger is not None:
                logger.close()

        def column(field):
            return np.array([getattr(r, field) for r in records], dtype=float)

        result = SimulationResult(
            timestamps=column('time'),
            setpoints=column('setpoint'),
            positions=column('position'),
            velocities=column('velocity'),
            outputs=column('output'),
            errors=column('error'),
            p_terms=column('proportional'),
            i_terms=column('integral'),
            d_terms=column('derivative'),
            disturbances=column('disturbance'),
            scenario_name=scenario.name,
            controller_params=self._params.to_dict(),
            plant_info=plant.get_info(),
            execution_time=time.perf_counter() - start_time
        )

        self._results.append(result)
        return result

    def run_comparison(
        self,
        scenario: SimulationScenario,
        param_sets: Dict[str, PIDParams]
    ) -> Dict[str, SimulationResult]:
        """
        Run the same scenario with several parameter sets.

        Args:
            scenario: Simulation scenario
            param_sets: Dictionary mapping names to parameter sets

        Returns:
            Dictionary mapping names to results
        """
        original = self._params
        results = {}
        try:
            for name, params in param_sets.items():
                self._params = params
                result = self.run(scenario)
                result.scenario_name = f"{scenario.name} - {name}"
                results[name] = result
        finally:
            self._params = original
        return results

    def analyze(self, result: SimulationResult) -> Dict[str, Any]:
        """
        Analyze simulation result.

        Args:
            result: Simulation result to analyze

        Returns:
            Metrics dictionary
        """
        params = result.controller_params or self._params.to_dict()
        return self._metrics.calculate_all_metrics(
            result.timestamps,
            result.setpoints,
            result.positions,
            result.outputs,
            output_limits=(params['output_min'], params['output_max'])
        )

    def plot_results(self, result: SimulationResult, components: bool = True) -> None:
        """Plot the response and, optionally, the PID term breakdown."""
        self._plotter.plot_response(result)
        if components:
            self._plotter.plot_components(result)

    def plot_comparison(
        self,
        results: Dict[str, SimulationResult],
        title: str = "Controller Comparison"
    ) -> None:
        self._plotter.plot_comparison(results, title=title)

    def set_params(self, params: PIDParams) -> None:
        """Update PID parameters for subsequent runs."""
        self._params = params

    def set_plant_params(self, params: PlantParams) -> None:
        """Update plant parameters for subsequent runs."""
        self._plant_params = params

    @property
    def params(self) -> PIDParams:
        return self._params

    @property
    def plant_params(self) -> PlantParams:
        return self._plant_params

    @property
    def results(self) -> List[SimulationResult]:
        """Get all simulation results."""
        return self._results

    @property
    def last_result(self) -> Optional[SimulationResult]:
        """Get most recent result."""
        return self._results[-1] if self._results else None

    @staticmethod
    def show():
        """Display all plots."""
        SimulationPlotter.show()
