"""
Potentials module for WKB Solver.

Example one-dimensional potentials. Each is a vectorised callable U(x)
and also provides analytic first and second derivatives and its
classical turning points at a given energy.
"""

from wkb_solver.potentials.harmonic import HarmonicPotential
from wkb_solver.potentials.double_well import DoubleWellPotential
from wkb_solver.potentials.linear import LinearPotential

__all__ = [
    "HarmonicPotential",
    "DoubleWellPotential",
    "LinearPotential",
]
