"""
Tests for validity zeros, bracket pairing and turning points.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from wkb_solver.core import turning_points
from wkb_solver.core.phase import Phase
from wkb_solver.core.turning_points import (
    TurningPointGroup,
    calc_turning_points,
    find_zeros,
    group_turning_points,
    validity_function,
)
from wkb_solver.numerics.roots import DeflatingZeroFinder, make_guess

# Validity zeros of U = x at E = 0 (m = ħ = 1): 1/√2 − x² = 0
LINEAR_ZERO = 0.5 ** 0.25


@pytest.mark.unit
class TestTurningPointGroup:
    """Test the turning point container."""

    def test_empty(self):
        group = TurningPointGroup()

        assert len(group) == 0
        assert not group
        assert group.turning_points == []

    def test_entries(self):
        group = TurningPointGroup([((-2.0, -1.0), -1.5), ((1.0, 2.0), 1.5)])

        assert len(group) == 2
        assert group
        assert group.brackets == [(-2.0, -1.0), (1.0, 2.0)]
        assert group.turning_points == [-1.5, 1.5]
        assert group[1] == ((1.0, 2.0), 1.5)
        assert [tp for _, tp in group] == [-1.5, 1.5]
        assert "1.500000" in repr(group)


@pytest.mark.unit
class TestValidityFunction:
    """Test v(x) = ħ/√(2m)·|U'| − (U − E)²."""

    def test_linear_potential(self, linear):
        valid = validity_function(Phase(energy=0.0, mass=1.0, potential=linear))

        assert_allclose(valid(0.0), 1.0 / np.sqrt(2.0))
        assert_allclose(valid(LINEAR_ZERO), 0.0, atol=1e-12)
        assert valid(2.0) < 0.0

    def test_vectorised(self, harmonic):
        valid = validity_function(Phase(energy=1.5, mass=1.0, potential=harmonic))
        x = np.linspace(-3.0, 3.0, 13)

        expected = np.abs(x) / np.sqrt(2.0) - (x ** 2 / 2.0 - 1.5) ** 2
        assert_allclose(valid(x), expected, atol=1e-12)

    def test_mass_enters_prefactor(self, linear):
        valid = validity_function(Phase(energy=0.0, mass=2.0, potential=linear))

        assert_allclose(valid(0.0), 0.5)


@pytest.mark.unit
class TestFindZeros:
    """Test deflated search for validity zeros."""

    def test_linear_potential(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        zeros = sorted(find_zeros(phase, (-5.0, 5.0), fast_params))

        assert_allclose(zeros, [-LINEAR_ZERO, LINEAR_ZERO], atol=1e-6)

    def test_zeros_outside_view_are_dropped(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        zeros = find_zeros(phase, (0.0, 5.0), fast_params)

        assert all(0.0 < z < 5.0 for z in zeros)

    def test_no_zeros_stops_after_first_round(self, harmonic, fast_params, monkeypatch):
        """Below the well bottom v = |x|/√2 − (x²/2 + 1)² < 0 everywhere."""
        calls = []

        def counting_guess(*args, **kwargs):
            calls.append(args[1])
            return make_guess(*args, **kwargs)

        monkeypatch.setattr(turning_points, "make_guess", counting_guess)
        phase = Phase(energy=-1.0, mass=1.0, potential=harmonic)

        assert find_zeros(phase, (-5.0, 5.0), fast_params) == []
        assert len(calls) == 1

    def test_failed_round_ends_search(self, linear, fast_params, monkeypatch):
        """Zeros found before the failing round are kept and no round follows it."""

        class FailsAfterFirstZero(DeflatingZeroFinder):
            def next_zero(self, guess):
                if self.previous_zeros:
                    return None
                return super().next_zero(guess)

        calls = []

        def counting_guess(*args, **kwargs):
            calls.append(args[1])
            return make_guess(*args, **kwargs)

        monkeypatch.setattr(turning_points, "DeflatingZeroFinder", FailsAfterFirstZero)
        monkeypatch.setattr(turning_points, "make_guess", counting_guess)
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        zeros = find_zeros(phase, (-5.0, 5.0), fast_params)

        assert len(zeros) == 1
        assert_allclose(abs(zeros[0]), LINEAR_ZERO, atol=1e-6)
        assert len(calls) == 2


@pytest.mark.unit
class TestGroupTurningPoints:
    """Test pairing of validity zeros into brackets."""

    def test_pairs_zeros(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        group = group_turning_points([LINEAR_ZERO, -LINEAR_ZERO], phase, fast_params)

        assert len(group) == 1
        assert_allclose(group.brackets[0], (-LINEAR_ZERO, LINEAR_ZERO))
        assert_allclose(group.turning_points[0], 0.0, atol=1e-7)

    def test_wrong_signs_raise(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        with pytest.raises(RuntimeError):
            group_turning_points(
                [-LINEAR_ZERO, -LINEAR_ZERO, LINEAR_ZERO, LINEAR_ZERO], phase, fast_params
            )

    def test_missing_left_boundary_is_synthesised(self, linear, fast_params):
        """Only the falling zero is known; the rising one is found by scanning left."""
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        group = group_turning_points([LINEAR_ZERO], phase, fast_params)

        assert len(group) == 1
        assert_allclose(group.brackets[0], (-LINEAR_ZERO, LINEAR_ZERO), atol=1e-6)
        assert_allclose(group.turning_points[0], 0.0, atol=1e-7)

    def test_missing_right_boundary_is_synthesised(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        group = group_turning_points([-LINEAR_ZERO], phase, fast_params)

        assert len(group) == 1
        assert_allclose(group.brackets[0], (-LINEAR_ZERO, LINEAR_ZERO), atol=1e-6)

    def test_no_zeros_give_empty_group(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        assert not group_turning_points([], phase, fast_params)


@pytest.mark.integration
class TestCalcTurningPoints:
    """Test turning-point detection end to end."""

    def test_linear_potential(self, linear, fast_params):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        group = calc_turning_points(phase, (-5.0, 5.0), fast_params)

        assert len(group) == 1
        assert_allclose(group.turning_points, [0.0], atol=1e-7)

    def test_harmonic(self, harmonic, fast_params):
        phase = Phase(energy=1.5, mass=1.0, potential=harmonic)

        group = calc_turning_points(phase, (-5.0, 5.0), fast_params)

        assert_allclose(group.turning_points, [-np.sqrt(3.0), np.sqrt(3.0)], atol=1e-6)

    def test_double_well(self, double_well, fast_params):
        """Four turning points below the barrier, each inside its own bracket."""
        phase = Phase(energy=2.0, mass=1.0, potential=double_well)

        group = calc_turning_points(phase, (-4.0, 4.0), fast_params)

        expected = double_well.classical_turning_points(2.0)
        assert len(group) == 4
        assert_allclose(group.turning_points, expected, atol=1e-6)
        for (t1, t2), x_t in group:
            assert t1 < x_t < t2

    def test_brackets_are_disjoint_and_sorted(self, double_well, fast_params):
        phase = Phase(energy=2.0, mass=1.0, potential=double_well)

        group = calc_turning_points(phase, (-4.0, 4.0), fast_params)

        edges = [edge for bracket in group.brackets for edge in bracket]
        assert edges == sorted(edges)

    def test_verbose_prints(self, linear, fast_params, capsys):
        phase = Phase(energy=0.0, mass=1.0, potential=linear)

        calc_turning_points(phase, (-5.0, 5.0), fast_params, verbose=True)

        assert "Turning points" in capsys.readouterr().out
