"""
Core module for WKB Solver.

Contains configuration constants, parameter definitions, the immutable
Phase shared by all approximants, turning-point detection and the
Bohr-Sommerfeld energy provider.
"""

from wkb_solver.core.constants import (
    H_BAR,
    EPSILON,
    SQRT_EPSILON,
    INTEG_STEPS,
    TRAPEZE_PER_THREAD,
    AIRY_TRANSITION_FRACTION,
    APPROX_INF,
)
from wkb_solver.core.parameters import WKBParameters
from wkb_solver.core.phase import Phase
from wkb_solver.core.energy import BohrSommerfeldAction, nth_energy
from wkb_solver.core.turning_points import (
    TurningPointGroup,
    validity_function,
    find_zeros,
    group_turning_points,
    calc_turning_points,
)

__all__ = [
    # Constants
    "H_BAR",
    "EPSILON",
    "SQRT_EPSILON",
    "INTEG_STEPS",
    "TRAPEZE_PER_THREAD",
    "AIRY_TRANSITION_FRACTION",
    "APPROX_INF",
    # Configuration
    "WKBParameters",
    "Phase",
    # Energy
    "BohrSommerfeldAction",
    "nth_energy",
    # Turning points
    "TurningPointGroup",
    "validity_function",
    "find_zeros",
    "group_turning_points",
    "calc_turning_points",
]
