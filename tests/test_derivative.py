"""
Tests for the five-point derivative.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from wkb_solver.numerics.derivative import (
    derivative,
    derivative_function,
    sign_of_derivative,
)
from wkb_solver.potentials import HarmonicPotential


@pytest.mark.unit
class TestDerivative:
    """Test derivative accuracy."""

    @pytest.mark.parametrize("x", [-7.5, -1.0, 0.0, 0.3, 2.0, 10.0])
    def test_square(self, x):
        assert_allclose(derivative(lambda t: t * t, x), 2.0 * x, rtol=1e-6, atol=1e-6)

    @pytest.mark.parametrize("x", [-3.0, 0.0, 1.0, 4.0])
    def test_exp(self, x):
        assert_allclose(derivative(np.exp, x), np.exp(x), rtol=1e-6)

    def test_vectorised(self):
        x = np.linspace(-2.0, 2.0, 41)

        assert_allclose(derivative(np.sin, x), np.cos(x), atol=1e-6)

    def test_complex_valued(self):
        """Works for functions returning complex numbers."""
        result = derivative(lambda t: np.exp(1j * t), 0.5)

        assert_allclose(result, 1j * np.exp(0.5j), atol=1e-6)

    def test_sign(self):
        assert sign_of_derivative(lambda t: -3.0 * t, 1.0) == -1.0
        assert sign_of_derivative(lambda t: t ** 3 + t, 0.0) == 1.0


@pytest.mark.unit
class TestDerivativeFunction:
    """Test analytic/numeric derivative selection."""

    def test_uses_analytic_derivative(self):
        pot = HarmonicPotential(omega=2.0)
        slope = derivative_function(pot)

        assert slope == pot.derivative
        assert_allclose(slope(1.5), 4.0 * 1.5)

    def test_falls_back_to_numeric(self):
        slope = derivative_function(np.sin)

        assert_allclose(slope(0.7), np.cos(0.7), atol=1e-6)
