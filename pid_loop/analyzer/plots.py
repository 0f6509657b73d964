"""
Plotting utilities for closed-loop simulation results.
"""

from typing import Dict, Tuple, TYPE_CHECKING
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

if TYPE_CHECKING:
    from pid_loop.simulation.simulator import SimulationResult


class SimulationPlotter:
    """
    Plotting helpers for simulation results.

    Figures are returned so callers can save them or add to them; nothing
    is shown until show() is called.
    """

    def __init__(self, style: str = 'seaborn-v0_8-whitegrid'):
        """
        Initialize plotter.

        Args:
            style: Matplotlib style to use
        """
        self._style = style if style in plt.style.available else 'default'

        self._colors = {
            'setpoint': '#2ecc71',
            'position': '#3498db',
            'error': '#e74c3c',
            'output': '#9b59b6',
            'p_term': '#f39c12',
            'i_term': '#1abc9c',
            'd_term': '#e67e22',
            'disturbance': '#7f8c8d',
        }

    def plot_response(
        self,
        result: 'SimulationResult',
        title: str = None,
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """
        Plot setpoint and position with the controller output on a second axis.

        Args:
            result: Simulation result
            title: Plot title (scenario name if None)
            figsize: Figure size

        Returns:
            Matplotlib Figure
        """
        with plt.style.context(self._style):
            fig, ax1 = plt.subplots(figsize=figsize)

            ax1.plot(result.timestamps, result.setpoints, '--', color=self._colors['setpoint'],
                     linewidth=2, label='Setpoint (SP)')
            ax1.plot(result.timestamps, result.positions, '-', color=self._colors['position'],
                     linewidth=1.5, label='Position (PV)')
            ax1.set_xlabel('Time (s)', fontsize=12)
            ax1.set_ylabel('Position', fontsize=12)
            ax1.set_title(title or result.scenario_name or 'Closed-Loop Response',
                          fontsize=14, fontweight='bold')
            ax1.legend(loc='upper left')
            ax1.grid(True, alpha=0.3)

            ax2 = ax1.twinx()
            ax2.plot(result.timestamps, result.outputs, '-', color=self._colors['output'],
                     linewidth=1, alpha=0.7, label='Output (MV)')
            if result.controller_params is not None:
                ax2.set_ylim(result.controller_params['output_min'] * 1.1,
                             result.controller_params['output_max'] * 1.1)
            ax2.set_ylabel('Output', fontsize=12, color=self._colors['output'])
            ax2.tick_params(axis='y', labelcolor=self._colors['output'])

            fig.tight_layout()
        return fig

    def plot_components(
        self,
        result: 'SimulationResult',
        title: str = "PID Components",
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """Plot the P, I and D terms and the disturbance force."""
        with plt.style.context(self._style):
            fig, ax = plt.subplots(figsize=figsize)

            ax.plot(result.timestamps, result.p_terms, color=self._colors['p_term'], label='P')
            ax.plot(result.timestamps, result.i_terms, color=self._colors['i_term'], label='I')
            ax.plot(result.timestamps, result.d_terms, color=self._colors['d_term'], label='D')
            if result.disturbances.any():
                ax.plot(result.timestamps, result.disturbances, ':',
                        color=self._colors['disturbance'], label='Disturbance')
            ax.axhline(y=0, color='gray', linestyle=':', alpha=0.5)
            ax.set_xlabel('Time (s)')
            ax.set_ylabel('Contribution')
            ax.set_title(title, fontsize=14, fontweight='bold')
            ax.legend(loc='upper right')
            ax.grid(True, alpha=0.3)

            fig.tight_layout()
        return fig

    def plot_comparison(
        self,
        results: Dict[str, 'SimulationResult'],
        title: str = "Controller Comparison",
        figsize: Tuple[int, int] = (12, 8)
    ) -> Figure:
        """Overlay positions and outputs of several runs."""
        with plt.style.context(self._style):
            fig, (ax1, ax2) = plt.subplots(2, 1, figsize=figsize, sharex=True)

            first = next(iter(results.values()), None)
            if first is not None:
                ax1.plot(first.timestamps, first.setpoints, '--',
                         color=self._colors['setpoint'], linewidth=2, label='Setpoint')

            for name, result in results.items():
                ax1.plot(result.timestamps, result.positions, linewidth=1.5, label=name)
                ax2.plot(result.timestamps, result.outputs, linewidth=1, label=name)

            ax1.set_ylabel('Position')
            ax1.set_title(title, fontsize=14, fontweight='bold')
            ax1.legend(loc='lower right')
            ax1.grid(True, alpha=0.3)

            ax2.set_xlabel('Time (s)')
            ax2.set_ylabel('Output')
            ax2.grid(True, alpha=0.3)

            fig.tight_layout()
        return fig

    @staticmethod
    def show():
        """Display all open plots."""
        plt.show()

    @staticmethod
    def save(fig: Figure, path: str, dpi: int = 150):
        """Save figure to file."""
        fig.savefig(path, dpi=dpi, bbox_inches='tight')
