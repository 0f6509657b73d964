"""
Unit tests for PID Controller.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_controller import PIDController, PIDTerms
from pid_loop.core.pid_params import PIDParams, PIDPresets
from pid_loop.core.filters import LowPassFilter
from pid_loop.utils.validators import InvalidConfig


class TestPIDController:
    """Test suite for PIDController class."""

    def test_initialization_defaults(self):
        """Test default limits and filter coefficient."""
        pid = PIDController(kp=1.5, ki=0.5, kd=3.5)
        assert pid.kp == 1.5
        assert pid.ki == 0.5
        assert pid.kd == 3.5
        assert pid.output_min == -100.0
        assert pid.output_max == 100.0
        assert pid.filter_alpha == 0.1
        assert pid.proportional_term == 0.0
        assert pid.integral_term == 0.0
        assert pid.derivative_term == 0.0

    def test_from_params(self):
        """Test construction from a parameter set."""
        params = PIDParams(kp=2.0, ki=0.5, kd=0.1, output_min=-5, output_max=5, filter_alpha=0.5)
        pid = PIDController.from_params(params)
        assert pid.params == params

    @pytest.mark.parametrize("output_min,output_max", [(10.0, 5.0), (5.0, 5.0)])
    def test_invalid_limits(self, output_min, output_max):
        """Test that inverted or equal limits are rejected."""
        with pytest.raises(InvalidConfig):
            PIDController(1.0, 0.0, 0.0, output_min=output_min, output_max=output_max)

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_invalid_filter_alpha(self, alpha):
        """Test that alpha outside (0, 1] is rejected."""
        with pytest.raises(InvalidConfig):
            PIDController(1.0, 0.0, 0.0, filter_alpha=alpha)

    def test_filter_alpha_one_allowed(self):
        """Test that alpha = 1 (no filtering) is accepted."""
        pid = PIDController(1.0, 0.0, 0.0, filter_alpha=1.0)
        assert pid.filter_alpha == 1.0

    def test_invalid_config_is_value_error(self):
        """Test InvalidConfig can be caught as ValueError."""
        with pytest.raises(ValueError):
            PIDController(1.0, 0.0, 0.0, output_min=1.0, output_max=0.0)

    def test_proportional_only(self):
        """Test P-only controller."""
        pid = PIDController(kp=2.0, ki=0.0, kd=0.0)

        # error = 20, P = 40
        output = pid.update(setpoint=100.0, measured_value=80.0, dt=0.04)
        assert output == pytest.approx(40.0)
        assert pid.proportional_term == pytest.approx(40.0)

    def test_proportional_recomputed_not_accumulated(self):
        """Test the P term depends only on the current error."""
        pid = PIDController(kp=2.0, ki=0.0, kd=0.0)
        for _ in range(5):
            pid.update(setpoint=10.0, measured_value=0.0, dt=0.1)
        assert pid.proportional_term == pytest.approx(20.0)

    def test_integral_accumulation(self):
        """Test integral term accumulates ki * error * dt."""
        pid = PIDController(kp=0.0, ki=1.0, kd=0.0)

        for _ in range(10):
            pid.update(setpoint=10.0, measured_value=0.0, dt=0.1)

        assert pid.integral_term == pytest.approx(10.0)

    def test_integral_uses_previous_value_for_candidate(self):
        """Test the integral updated this step is included in the returned output."""
        pid = PIDController(kp=1.0, ki=1.0, kd=0.0)
        first = pid.update(setpoint=1.0, measured_value=0.0, dt=1.0)
        # Candidate (1.0) is inside the limits, so I becomes 1.0 and is
        # included in the returned output
        assert pid.integral_term == pytest.approx(1.0)
        assert first == pytest.approx(2.0)

    def test_output_saturation(self):
        """Test output saturation limits."""
        pid = PIDController(kp=10.0, ki=0.0, kd=0.0, output_min=-5.0, output_max=5.0)

        assert pid.update(setpoint=100.0, measured_value=0.0, dt=0.1) == 5.0
        assert pid.update(setpoint=0.0, measured_value=100.0, dt=0.1) == -5.0

    def test_output_always_within_limits(self):
        """Test the output stays clamped for arbitrary inputs."""
        rng = np.random.default_rng(42)
        pid = PIDController(kp=3.0, ki=2.0, kd=1.5, output_min=-20.0, output_max=35.0,
                            filter_alpha=0.3)

        for _ in range(2000):
            setpoint, measured = rng.uniform(-500, 500, size=2)
            dt = rng.uniform(1e-4, 0.5)
            output = pid.update(setpoint, measured, dt)
            assert -20.0 <= output <= 35.0

    def test_anti_windup_stops_and_resumes(self):
        """Test integration halts while saturated and resumes when it clears."""
        pid = PIDController(kp=1.0, ki=1.0, kd=0.0, output_min=-10.0, output_max=10.0)

        # Unsaturated: integral grows
        for _ in range(5):
            pid.update(setpoint=2.0, measured_value=0.0, dt=0.1)
        integral_before = pid.integral_term
        assert integral_before == pytest.approx(1.0)

        # Saturated: integral frozen
        for _ in range(100):
            output = pid.update(setpoint=100.0, measured_value=0.0, dt=0.1)
            assert output == 10.0
            assert pid.integral_term == integral_before

        # Desaturated: integral grows again
        pid.update(setpoint=2.0, measured_value=0.0, dt=0.1)
        assert pid.integral_term == pytest.approx(integral_before + 0.2)

    def test_anti_windup_negative_saturation(self):
        """Test the lower limit also freezes the integral."""
        pid = PIDController(kp=1.0, ki=1.0, kd=0.0, output_min=-10.0, output_max=10.0)
        for _ in range(50):
            output = pid.update(setpoint=-100.0, measured_value=0.0, dt=0.1)
        assert output == -10.0
        assert pid.integral_term == 0.0

    def test_candidate_on_limit_does_not_integrate(self):
        """Test a candidate exactly on a limit counts as saturated."""
        pid = PIDController(kp=1.0, ki=1.0, kd=0.0, output_min=-10.0, output_max=10.0)
        pid.update(setpoint=10.0, measured_value=0.0, dt=0.1)
        assert pid.integral_term == 0.0

    def test_derivative_on_measurement(self):
        """Test a setpoint jump does not change the derivative term."""
        steady = PIDController(kp=1.0, ki=0.0, kd=2.0)
        jumped = PIDController(kp=1.0, ki=0.0, kd=2.0)
        measurements = [0.0, 1.0, 2.0, 2.0, 2.5]

        for i, measured in enumerate(measurements):
            setpoint_b = 10.0 if i < 3 else 60.0
            out_a = steady.update(10.0, measured, 0.1)
            out_b = jumped.update(setpoint_b, measured, 0.1)
            assert jumped.derivative_term == steady.derivative_term
            if i == 3:
                # The jump only shows up through the P term
                assert out_b - out_a == pytest.approx(50.0)

    def test_derivative_zero_for_constant_measurement(self):
        """Test derivative stays at zero when the measurement never moves from 0."""
        pid = PIDController(kp=0.0, ki=0.0, kd=5.0)
        pid.update(setpoint=0.0, measured_value=0.0, dt=0.1)
        pid.update(setpoint=100.0, measured_value=0.0, dt=0.1)
        assert pid.derivative_term == 0.0

    def test_derivative_filter(self):
        """Test the derivative term follows the single-pole filter formula."""
        pid = PIDController(kp=0.0, ki=0.0, kd=2.0, filter_alpha=0.25)

        pid.update(setpoint=0.0, measured_value=1.0, dt=0.5)
        # raw = -kd * (1 - 0) / 0.5 = -4; filtered = 0 * 0.75 + -4 * 0.25
        assert pid.derivative_term == pytest.approx(-1.0)

        pid.update(setpoint=0.0, measured_value=1.0, dt=0.5)
        # No motion: previous value decays by (1 - alpha)
        assert pid.derivative_term == pytest.approx(-0.75)

    def test_zero_dt_is_noop(self):
        """Test dt = 0 and negative dt return the previous output and change nothing."""
        pid = PIDController(kp=1.5, ki=0.5, kd=3.5)
        for measured in (0.0, 3.0, 7.0):
            last_output = pid.update(80.0, measured, 0.04)
        state_before = pid.get_state()

        assert pid.update(10.0, 50.0, 0.0) == last_output
        assert pid.update(-10.0, 99.0, -0.04) == last_output
        assert pid.get_state() == state_before

    def test_zero_dt_while_saturated(self):
        """Test the no-op guard returns the clamped previous output."""
        pid = PIDController(kp=10.0, ki=0.0, kd=0.0, output_min=-5.0, output_max=5.0)
        last_output = pid.update(100.0, 0.0, 0.1)
        assert pid.update(100.0, 0.0, 0.0) == last_output == 5.0

    def test_zero_dt_on_fresh_controller(self):
        """Test the no-op guard on a fresh controller returns zero."""
        pid = PIDController(kp=1.0, ki=1.0, kd=1.0)
        assert pid.update(10.0, 0.0, 0.0) == 0.0

    def test_set_gains(self):
        """Test gain changes apply on the next update."""
        pid = PIDController(kp=1.0, ki=0.0, kd=0.0)
        pid.update(10.0, 0.0, 0.1)
        pid.set_gains(3.0, 0.0, 0.0)
        assert pid.kp == 3.0
        assert pid.update(10.0, 0.0, 0.1) == pytest.approx(30.0)

    def test_set_gains_keeps_accumulators(self):
        """Test retuning leaves integral and derivative state untouched."""
        pid = PIDController(kp=1.0, ki=1.0, kd=1.0)
        for measured in (0.0, 1.0, 2.0):
            pid.update(5.0, measured, 0.1)
        integral = pid.integral_term
        derivative = pid.derivative_term

        pid.set_gains(4.0, 0.1, 0.0)

        assert pid.integral_term == integral
        assert pid.derivative_term == derivative

    def test_set_gains_rejects_non_numbers(self):
        """Test gains must be real numbers."""
        pid = PIDController(kp=1.0)
        with pytest.raises(InvalidConfig):
            pid.set_gains("1.0", 0.0, 0.0)

    def test_reset(self):
        """Test reset clears accumulators but keeps gains and limits."""
        pid = PIDController(kp=1.0, ki=1.0, kd=0.5, output_min=-50, output_max=50)
        for measured in range(10):
            pid.update(setpoint=20.0, measured_value=float(measured), dt=0.1)
        assert pid.integral_term > 0

        pid.reset()

        assert pid.integral_term == 0.0
        assert pid.derivative_term == 0.0
        assert pid.output == 0.0
        assert pid.kp == 1.0
        assert pid.output_max == 50.0

    def test_reset_reproduces_fresh_controller(self):
        """Test the first update after reset matches a new controller."""
        fresh = PIDController(kp=1.5, ki=0.5, kd=3.5)
        expected = fresh.update(80.0, 0.0, 0.04)

        pid = PIDController(kp=1.5, ki=0.5, kd=3.5)
        for measured in np.linspace(0, 60, 50):
            pid.update(80.0, float(measured), 0.04)
        pid.reset()

        assert pid.update(80.0, 0.0, 0.04) == expected

    def test_terms_snapshot(self):
        """Test the snapshot mirrors the individual term properties."""
        pid = PIDController(kp=10.0, ki=1.0, kd=1.0, output_min=-5.0, output_max=5.0)
        output = pid.update(100.0, 1.0, 0.1)
        terms = pid.terms

        assert isinstance(terms, PIDTerms)
        assert terms.output == output
        assert terms.proportional == pid.proportional_term
        assert terms.integral == pid.integral_term
        assert terms.derivative == pid.derivative_term
        assert terms.error == pytest.approx(99.0)
        assert terms.saturated

    def test_terms_snapshot_is_immutable(self):
        """Test the snapshot cannot be used to modify controller state."""
        pid = PIDController(kp=1.0)
        pid.update(1.0, 0.0, 0.1)
        with pytest.raises(AttributeError):
            pid.terms.integral = 5.0


class TestLowPassFilter:
    """Test suite for LowPassFilter."""

    def test_starts_from_zero(self):
        """Test the first output is alpha times the input."""
        lpf = LowPassFilter(alpha=0.2)
        assert lpf.update(10.0) == pytest.approx(2.0)

    def test_converges_to_constant_input(self):
        """Test the filter settles on a constant input."""
        lpf = LowPassFilter(alpha=0.1)
        for _ in range(500):
            lpf.update(3.0)
        assert lpf.output == pytest.approx(3.0)

    def test_reset(self):
        """Test reset returns the state to zero."""
        lpf = LowPassFilter(alpha=0.5)
        lpf.update(4.0)
        lpf.reset()
        assert lpf.output == 0.0

    def test_invalid_alpha(self):
        """Test alpha validation."""
        with pytest.raises(InvalidConfig):
            LowPassFilter(alpha=0.0)


class TestPIDParams:
    """Test suite for PIDParams class."""

    def test_default_values(self):
        """Test default parameter values."""
        params = PIDParams()
        assert params.kp == 1.0
        assert params.ki == 0.0
        assert params.kd == 0.0
        assert params.output_min == -100.0
        assert params.output_max == 100.0
        assert params.filter_alpha == 0.1

    def test_negative_gains_allowed(self):
        """Test gains are only required to be real numbers."""
        params = PIDParams(kp=-1.0)
        assert params.kp == -1.0

    def test_validation_invalid_output_limits(self):
        """Test validation of output limits."""
        with pytest.raises(InvalidConfig):
            PIDParams(output_min=10.0, output_max=5.0)

    def test_validation_non_finite_gain(self):
        """Test NaN gains are rejected."""
        with pytest.raises(InvalidConfig):
            PIDParams(kp=float('nan'))

    def test_copy(self):
        """Test parameter copying."""
        params1 = PIDParams(kp=1.0, ki=0.5)
        params2 = params1.copy(kp=2.0)

        assert params1.kp == 1.0
        assert params2.kp == 2.0
        assert params2.ki == 0.5

    def test_from_dict(self):
        """Test creation from dictionary."""
        params = PIDParams.from_dict({'kp': 3.0, 'ki': 1.0, 'kd': 0.5})
        assert params.kp == 3.0
        assert params.ki == 1.0
        assert params.kd == 0.5

    def test_from_dict_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(InvalidConfig):
            PIDParams.from_dict({'kp': 1.0, 'sample_time': 0.01})

    def test_json_serialization(self):
        """Test JSON serialization keeps every field."""
        params1 = PIDParams(kp=2.0, ki=0.5, kd=0.1, output_min=-1, output_max=3, filter_alpha=0.4)
        params2 = PIDParams.from_json(params1.to_json())
        assert params1 == params2


class TestPIDPresets:
    """Test suite for gain presets."""

    def test_preset_values(self):
        """Test preset gains."""
        damped = PIDPresets.pid_damped()
        assert (damped.kp, damped.ki, damped.kd) == (1.5, 0.5, 3.5)
        oscillatory = PIDPresets.pid_oscillatory()
        assert (oscillatory.kp, oscillatory.ki, oscillatory.kd) == (8.0, 2.0, 1.0)

    def test_get_by_name(self):
        """Test preset lookup by name."""
        for name in PIDPresets.names():
            assert isinstance(PIDPresets.get(name), PIDParams)
        assert PIDPresets.get('pi').ki == 0.4

    def test_unknown_preset(self):
        """Test unknown preset names are rejected."""
        with pytest.raises(InvalidConfig):
            PIDPresets.get('ziegler_nichols')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
