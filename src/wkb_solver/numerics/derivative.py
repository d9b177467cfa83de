"""
Five-point stencil numerical differentiation.

The same estimator is used for every derivative in the solver
(validity functions, turning-point classification, Airy slopes) so that
all subsystems share one error characteristic.
"""

import numpy as np
from typing import Callable

from wkb_solver.core.constants import SQRT_EPSILON


def derivative(func: Callable, x):
    """
    Richardson-extrapolated central difference f'(x).

    With h = sqrt(machine epsilon) and m_k the central difference at
    step k·h,

        f'(x) ≈ (15·m1 − 6·m2 + m3) / (10h),   error O(h⁴).

    Works for any result type supporting +, −, scalar × and ÷ (floats,
    complex numbers, numpy arrays). x may be a numpy array when func is
    vectorised.

    Args:
        func: Function to differentiate.
        x: Evaluation point(s).

    Returns:
        Derivative estimate, same type as func's output.
    """
    dx1 = SQRT_EPSILON
    dx2 = dx1 * 2.0
    dx3 = dx1 * 3.0

    m1 = (func(x + dx1) - func(x - dx1)) / 2.0
    m2 = (func(x + dx2) - func(x - dx2)) / 4.0
    m3 = (func(x + dx3) - func(x - dx3)) / 6.0

    fifteen_m1 = m1 * 15.0
    six_m2 = m2 * 6.0
    ten_dx1 = dx1 * 10.0

    return ((fifteen_m1 - six_m2) + m3) / ten_dx1


def sign_of_derivative(func: Callable, x) -> float:
    """Sign (-1, 0, +1) of derivative(func, x)."""
    return float(np.sign(derivative(func, x)))


def derivative_function(func: Callable) -> Callable:
    """
    First derivative of func as a callable.

    Objects that know their own derivative (the potentials in
    wkb_solver.potentials expose a `derivative` method) supply it
    directly; anything else is differentiated numerically. Functions built
    on top of U' (the validity function) are differentiated again, and a
    nested finite difference amplifies rounding noise by 1/h.
    """
    analytic = getattr(func, 'derivative', None)
    if callable(analytic):
        return analytic
    return lambda x: derivative(func, x)
