"""
Tests for solver parameters and constants.
"""

import pytest

from wkb_solver.core import constants
from wkb_solver.core.constants import get_constants_json_path, load_constants_from_json
from wkb_solver.core.parameters import WKBParameters


@pytest.mark.unit
class TestConstants:
    """Test constants loading."""

    def test_json_exists(self):
        assert get_constants_json_path().name == "constants.json"
        assert get_constants_json_path().exists()

    def test_loaded_keys(self):
        loaded = load_constants_from_json()

        for key in ["hbar", "integ_steps", "approx_inf", "accuracy", "max_workers"]:
            assert key in loaded

    def test_module_values(self):
        assert constants.H_BAR > 0
        assert constants.APPROX_INF[0] < constants.APPROX_INF[1]
        assert constants.SQRT_EPSILON ** 2 == pytest.approx(constants.EPSILON)


@pytest.mark.unit
class TestWKBParameters:
    """Test parameter defaults and validation."""

    def test_defaults_follow_constants(self):
        params = WKBParameters()

        assert params.hbar == constants.H_BAR
        assert params.integ_steps == constants.INTEG_STEPS
        assert params.approx_inf == constants.APPROX_INF
        assert params.accuracy == constants.ACCURACY

    def test_approx_inf_is_float_tuple(self):
        params = WKBParameters(approx_inf=[-5, 5])

        assert params.approx_inf == (-5.0, 5.0)
        assert isinstance(params.approx_inf, tuple)

    @pytest.mark.parametrize("kwargs", [
        {"hbar": 0.0},
        {"integ_steps": 1},
        {"trapeze_per_thread": 0},
        {"airy_transition_fraction": 0.0},
        {"airy_transition_fraction": 1.5},
        {"approx_inf": (5.0, -5.0)},
        {"view_factor": -0.1},
        {"max_turning_points": 0},
        {"accuracy": 0.0},
        {"guess_points": 0},
        {"max_newton_iters": 0},
        {"max_workers": 0},
    ])
    def test_invalid_values_raise(self, kwargs):
        with pytest.raises(ValueError):
            WKBParameters(**kwargs)

    def test_repr(self):
        text = repr(WKBParameters(integ_steps=1234))

        assert "integ_steps = 1234" in text
