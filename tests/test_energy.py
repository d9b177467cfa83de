"""
Tests for Bohr-Sommerfeld energies.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from wkb_solver.core.energy import BohrSommerfeldAction, nth_energy
from wkb_solver.core.parameters import WKBParameters
from wkb_solver.potentials import DoubleWellPotential, HarmonicPotential


@pytest.fixture
def energy_params():
    return WKBParameters(integ_steps=20000, approx_inf=(-10.0, 10.0))


@pytest.mark.unit
class TestBohrSommerfeldAction:
    """Test the classical action integral."""

    def test_harmonic_action(self, energy_params):
        """S(E) = πE/ω for the oscillator."""
        action = BohrSommerfeldAction(HarmonicPotential(), 1.0, (-10.0, 10.0), energy_params)

        assert_allclose(action(1.0), np.pi, atol=1e-3)
        assert_allclose(action(2.5), 2.5 * np.pi, atol=1e-3)

    def test_below_minimum_is_zero(self, energy_params):
        action = BohrSommerfeldAction(HarmonicPotential(), 1.0, (-10.0, 10.0), energy_params)

        assert action(-1.0) == 0.0

    def test_potential_extremes(self, energy_params):
        action = BohrSommerfeldAction(HarmonicPotential(), 1.0, (-10.0, 10.0), energy_params)

        assert_allclose(action.potential_min, 0.0, atol=1e-6)
        assert_allclose(action.potential_max, 50.0)

    def test_invalid_mass_raises(self, energy_params):
        with pytest.raises(ValueError):
            BohrSommerfeldAction(HarmonicPotential(), 0.0, (-10.0, 10.0), energy_params)


@pytest.mark.unit
class TestNthEnergy:
    """Test the quantisation condition solve."""

    @pytest.mark.parametrize("n", [0, 1, 2, 5])
    def test_harmonic_levels(self, n, energy_params):
        pot = HarmonicPotential()

        energy = nth_energy(n, 1.0, pot, (-10.0, 10.0), energy_params)

        assert_allclose(energy, pot.energy_level(n), atol=1e-3)

    @pytest.mark.parametrize("n", [0, 2])
    def test_harmonic_omega_two(self, n, energy_params):
        pot = HarmonicPotential(omega=2.0)

        energy = nth_energy(n, 1.0, pot, (-10.0, 10.0), energy_params)

        assert_allclose(energy, 2.0 * (n + 0.5), atol=1e-3)

    def test_levels_increase(self, energy_params):
        pot = DoubleWellPotential(V0=10.0, a=2.0)

        levels = [nth_energy(n, 1.0, pot, (-4.0, 4.0), energy_params) for n in range(4)]

        assert all(a < b for a, b in zip(levels, levels[1:]))

    def test_negative_n_raises(self, energy_params):
        with pytest.raises(ValueError):
            nth_energy(-1, 1.0, HarmonicPotential(), (-10.0, 10.0), energy_params)

    def test_no_level_below_maximum_raises(self, energy_params):
        with pytest.raises(ValueError):
            nth_energy(50, 1.0, DoubleWellPotential(V0=10.0, a=2.0), (-3.0, 3.0), energy_params)
