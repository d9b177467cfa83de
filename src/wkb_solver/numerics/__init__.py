"""
Numerics module for WKB Solver.

Chunked parallel trapezoid integration, the five-point derivative and
root finding with zero deflation.
"""

from wkb_solver.numerics.integrate import (
    SampledPoint,
    SampledPoints,
    parallel_map,
    index_to_range,
    evaluate_function_between,
    integrate,
    cumulative_integrate,
)
from wkb_solver.numerics.derivative import derivative, derivative_function
from wkb_solver.numerics.roots import (
    newton,
    newton_bounded,
    bracket_sign_change,
    regula_falsi,
    bracket_then_refine,
    DeflatingZeroFinder,
    make_guess,
)

__all__ = [
    "SampledPoint",
    "SampledPoints",
    "parallel_map",
    "index_to_range",
    "evaluate_function_between",
    "integrate",
    "cumulative_integrate",
    "derivative",
    "derivative_function",
    "newton",
    "newton_bounded",
    "bracket_sign_change",
    "regula_falsi",
    "bracket_then_refine",
    "DeflatingZeroFinder",
    "make_guess",
]
