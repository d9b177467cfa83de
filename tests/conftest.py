"""
Pytest configuration for WKB Solver test suite.

Fixtures provide reduced-resolution parameters so that full wavefunction
assemblies stay fast.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from wkb_solver.core.parameters import WKBParameters
from wkb_solver.potentials import HarmonicPotential, DoubleWellPotential, LinearPotential


def pytest_configure(config):
    """Called after command line options have been parsed."""
    # Add markers for test organization
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


@pytest.fixture
def fast_params():
    """Parameters for assemblies on approx_inf = (-20, 20)."""
    return WKBParameters(
        integ_steps=8000,
        approx_inf=(-20.0, 20.0),
        max_newton_iters=1000,
    )


@pytest.fixture
def harmonic_params():
    """Parameters for the harmonic oscillator on approx_inf = (-10, 10)."""
    return WKBParameters(
        integ_steps=8000,
        approx_inf=(-10.0, 10.0),
        max_newton_iters=1000,
    )


@pytest.fixture
def harmonic():
    return HarmonicPotential(omega=1.0, mass=1.0)


@pytest.fixture
def double_well():
    return DoubleWellPotential(V0=10.0, a=2.0)


@pytest.fixture
def linear():
    return LinearPotential(slope=1.0)
