#!/usr/bin/env python3
"""
Interactive Real-Time Demo

The animation callback fires at whatever rate matplotlib manages; the
fixed-step driver converts the wall-clock time between frames into whole
simulation steps.
"""

import sys
import time
from collections import deque
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Slider, Button

from pid_loop.core.pid_controller import PIDController
from pid_loop.core.pid_params import PIDPresets
from pid_loop.plants.mechanical import MechanicalPlant, PlantPresets
from pid_loop.simulation.driver import FixedStepDriver, DEFAULT_TIMESTEP, DISTURBANCE_FORCE

MAX_DATA_POINTS = 300
SETPOINT = 80.0


def run_interactive_simulation():
    print("=" * 60)
    print("Interactive PID Simulation")
    print("=" * 60)
    print("\nUse sliders to adjust PID gains in real-time!")
    print("'Disturbance' toggles a constant force, presets restart the run.\n")

    controller = PIDController.from_params(PIDPresets.pid_damped())
    plant = MechanicalPlant.from_params(PlantPresets.default())
    driver = FixedStepDriver(controller, plant, timestep=DEFAULT_TIMESTEP, setpoint=SETPOINT)

    # Display window only; the simulation itself keeps no history
    history = {key: deque(maxlen=MAX_DATA_POINTS) for key in ('t', 'sp', 'pv', 'mv')}

    fig = plt.figure(figsize=(13, 8))
    fig.suptitle('Interactive PID Controller', fontsize=16, fontweight='bold')
    ax = fig.add_axes([0.08, 0.38, 0.84, 0.52])
    ax_mv = ax.twinx()

    line_sp, = ax.plot([], [], 'g--', linewidth=2, label='Setpoint (SP)')
    line_pv, = ax.plot([], [], 'b-', linewidth=1.5, label='Position (PV)')
    line_mv, = ax_mv.plot([], [], 'm-', linewidth=1, alpha=0.7, label='Output (MV)')
    ax.set_ylim(-10, 120)
    ax_mv.set_ylim(-110, 110)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Position')
    ax_mv.set_ylabel('Output')
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)

    params = controller.params
    slider_kp = Slider(fig.add_axes([0.12, 0.24, 0.35, 0.03]), 'Kp', 0.0, 10.0,
                       valinit=params.kp, color='orange')
    slider_ki = Slider(fig.add_axes([0.12, 0.19, 0.35, 0.03]), 'Ki', 0.0, 5.0,
                       valinit=params.ki, color='cyan')
    slider_kd = Slider(fig.add_axes([0.12, 0.14, 0.35, 0.03]), 'Kd', 0.0, 5.0,
                       valinit=params.kd, color='brown')

    btn_reset = Button(fig.add_axes([0.58, 0.22, 0.12, 0.05]), 'Reset')
    btn_disturb = Button(fig.add_axes([0.74, 0.22, 0.16, 0.05]), 'Disturbance')
    preset_axes = [fig.add_axes([0.08 + i * 0.22, 0.05, 0.2, 0.05])
                   for i in range(len(PIDPresets.names()))]
    preset_buttons = [Button(a, name) for a, name in zip(preset_axes, PIDPresets.names())]

    terms_text = fig.text(0.58, 0.15, '', fontsize=10, family='monospace')

    def update_gains(val):
        driver.set_gains(slider_kp.val, slider_ki.val, slider_kd.val)

    for slider in (slider_kp, slider_ki, slider_kd):
        slider.on_changed(update_gains)

    def reset(event):
        driver.reset()
        plant.reposition(0.0)
        for values in history.values():
            values.clear()

    def toggle_disturbance(event):
        active = plant.disturbance != 0
        driver.set_disturbance(0.0 if active else DISTURBANCE_FORCE)

    def make_preset_handler(name):
        def apply_preset(event):
            preset = PIDPresets.get(name)
            slider_kp.set_val(preset.kp)
            slider_ki.set_val(preset.ki)
            slider_kd.set_val(preset.kd)
            reset(event)
        return apply_preset

    btn_reset.on_clicked(reset)
    btn_disturb.on_clicked(toggle_disturbance)
    for button, name in zip(preset_buttons, PIDPresets.names()):
        button.on_clicked(make_preset_handler(name))

    def animate(frame):
        for record in driver.tick(time.perf_counter()):
            history['t'].append(record.time)
            history['sp'].append(record.setpoint)
            history['pv'].append(record.position)
            history['mv'].append(record.output)

        if history['t']:
            line_sp.set_data(history['t'], history['sp'])
            line_pv.set_data(history['t'], history['pv'])
            line_mv.set_data(history['t'], history['mv'])
            ax.set_xlim(history['t'][0], max(history['t'][-1], history['t'][0] + 1.0))

            terms = controller.terms
            terms_text.set_text(
                f"Error: {terms.error:+8.2f}\n"
                f"P: {terms.proportional:+8.2f}  I: {terms.integral:+8.2f}  "
                f"D: {terms.derivative:+8.2f}"
            )

        return line_sp, line_pv, line_mv

    anim = FuncAnimation(fig, animate, interval=20, blit=False, cache_frame_data=False)

    plt.show()
    return anim


if __name__ == "__main__":
    run_interactive_simulation()
