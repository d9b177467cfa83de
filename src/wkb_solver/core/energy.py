"""
Bohr-Sommerfeld energy provider.

The wavefunction builder treats the energy of the n-th state as an
opaque input. This module supplies it from the quantisation condition

    ∫ sqrt(max(0, 2m(E − U(x)))) dx = (n + ½) π ħ

integrated over the approximate-infinity bounds, so that multi-well
potentials (several allowed regions) are handled by the same formula.
"""

import numpy as np
from typing import Callable, Optional, Tuple
from scipy.optimize import brentq

from wkb_solver.core.parameters import WKBParameters
from wkb_solver.numerics.integrate import SampledPoints, evaluate_function_between, integrate


class BohrSommerfeldAction:
    """
    Classical action S(E) = ∫ p dx over the allowed regions.

    The potential is sampled once; each action evaluation is one
    trapezoid integral over the cached samples.
    """

    def __init__(
        self,
        potential: Callable,
        mass: float,
        approx_inf: Tuple[float, float],
        params: Optional[WKBParameters] = None
    ):
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")
        self.params = params or WKBParameters()
        self.mass = mass
        self.samples = evaluate_function_between(
            potential,
            approx_inf[0],
            approx_inf[1],
            self.params.integ_steps,
            self.params.trapeze_per_thread,
            self.params.max_workers,
        )

    @property
    def potential_min(self) -> float:
        return float(np.min(self.samples.y))

    @property
    def potential_max(self) -> float:
        return float(np.max(self.samples.y))

    def __call__(self, energy: float) -> float:
        momentum = np.sqrt(np.clip(2.0 * self.mass * (energy - self.samples.y), 0.0, None))
        return float(integrate(
            SampledPoints(x=self.samples.x, y=momentum),
            self.params.trapeze_per_thread,
            self.params.max_workers,
        ))


def nth_energy(
    n: int,
    mass: float,
    potential: Callable,
    approx_inf: Tuple[float, float],
    params: Optional[WKBParameters] = None,
    tol: float = 1e-12
) -> float:
    """
    Energy of the n-th bound state (n = 0 is the ground state).

    Args:
        n: Quantum number (>= 0).
        mass: Particle mass.
        potential: Vectorised potential U(x).
        approx_inf: Integration bounds standing in for (-inf, inf).
        params: Solver parameters (resolution, hbar).
        tol: Absolute energy tolerance for the root solve.

    Returns:
        E_n.

    Raises:
        ValueError: n is negative, or no n-th level fits below the largest
            potential value on approx_inf.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    params = params or WKBParameters()

    action = BohrSommerfeldAction(potential, mass, approx_inf, params)
    target = (n + 0.5) * np.pi * params.hbar

    def condition(energy: float) -> float:
        return action(energy) - target

    # Expand the bracket until the action exceeds the target
    e_lo = action.potential_min
    e_max = action.potential_max
    gap = max(params.hbar, 1e-3 * (e_max - e_lo))
    e_hi = e_lo + gap
    while condition(e_hi) <= 0.0:
        if e_hi >= e_max:
            raise ValueError(
                f"No bound state n={n} below the potential maximum {e_max:.6g} "
                f"on {approx_inf}"
            )
        gap *= 2.0
        e_hi = min(e_lo + gap, e_max)

    return float(brentq(condition, e_lo, e_hi, xtol=tol))
