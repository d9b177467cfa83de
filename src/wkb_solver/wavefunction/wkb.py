"""
WKB approximant.

    ψ(x) = (c₊ e^{Φ(x)} + c₋ e^{−Φ(x)}) / √κ(x),   Φ(x) = ∫_{x_ref}^{x} κ

with κ = phase.momentum (real in forbidden regions, imaginary in allowed
ones). Φ is read from a phase table built once per approximant: κ is
sampled over the table interval, integrated cumulatively, and the panel
from the nearest grid point to x is added by the trapezoid rule.
"""

import numpy as np
from typing import Optional, Tuple

from wkb_solver.core.phase import Phase
from wkb_solver.core.parameters import WKBParameters
from wkb_solver.numerics.integrate import SampledPoints, cumulative_integrate
from wkb_solver.wavefunction.joint import as_output


class PhaseTable:
    """
    Cumulative ∫κ on a uniform grid spanning [lo, hi].

    Attributes:
        grid: Sample positions.
        momentum: κ at the sample positions.
        cumulative: ∫_{grid[0]}^{grid[k]} κ.
    """

    def __init__(
        self,
        phase: Phase,
        bounds: Tuple[float, float],
        params: Optional[WKBParameters] = None
    ):
        params = params or WKBParameters()
        lo, hi = float(min(bounds)), float(max(bounds))
        self.phase = phase
        self.grid = np.linspace(lo, hi, max(params.integ_steps, 2))
        self.momentum = np.asarray(phase.momentum(self.grid), dtype=complex)
        self.cumulative = cumulative_integrate(
            SampledPoints(x=self.grid, y=self.momentum),
            params.trapeze_per_thread,
            params.max_workers,
        )

    @property
    def bounds(self) -> Tuple[float, float]:
        return (float(self.grid[0]), float(self.grid[-1]))

    def integral_from_start(self, x, kappa_x=None):
        """∫_{grid[0]}^{x} κ; positions outside the grid extend the end panels."""
        x = np.asarray(x, dtype=float)
        if kappa_x is None:
            kappa_x = self.phase.momentum(x)
        idx = np.clip(np.searchsorted(self.grid, x, side='right') - 1, 0, len(self.grid) - 2)
        return (
            self.cumulative[idx]
            + (x - self.grid[idx]) * (self.momentum[idx] + kappa_x) / 2.0
        )

    def integral(self, x_ref: float, x, kappa_x=None):
        """∫_{x_ref}^{x} κ."""
        return self.integral_from_start(x, kappa_x) - self.integral_from_start(x_ref)


class WkbApproximant:
    """
    WKB solution with fixed coefficients, anchored at x_ref.

    Built through the oscillating() and decaying() factories, which choose
    the coefficients for a classically allowed or forbidden region on one
    side of the reference point.

    Attributes:
        phase: Shared physical configuration.
        x_ref: Lower limit of the phase integral.
        c_plus: Coefficient of e^{Φ}.
        c_minus: Coefficient of e^{−Φ}.
        side: +1 if the approximant is used right of x_ref, −1 if left.
        table: Phase table covering the region of use.
    """

    def __init__(
        self,
        phase: Phase,
        x_ref: float,
        c_plus: complex,
        c_minus: complex,
        table: PhaseTable,
        side: int = 1
    ):
        self.phase = phase
        self.x_ref = float(x_ref)
        self.c_plus = complex(c_plus)
        self.c_minus = complex(c_minus)
        self.table = table
        self.side = side
        self._ref_integral = complex(table.integral_from_start(self.x_ref))

    @classmethod
    def oscillating(
        cls,
        phase: Phase,
        x_ref: float,
        side: int,
        amplitude: complex,
        table: PhaseTable
    ) -> 'WkbApproximant':
        """
        Allowed region on `side` of x_ref.

        The coefficients make ψ = 2A·cos(θ − φ)/√k with θ = |∫_{x_ref}^{x} k|
        and φ = phase.phase_off, on either side.
        """
        a = complex(amplitude)
        first = a * np.exp(1j * (np.pi / 4.0 - phase.phase_off))
        second = a * np.exp(1j * (np.pi / 4.0 + phase.phase_off))
        if side > 0:
            return cls(phase, x_ref, first, second, table, side=1)
        return cls(phase, x_ref, second, first, table, side=-1)

    @classmethod
    def decaying(
        cls,
        phase: Phase,
        x_ref: float,
        side: int,
        amplitude: complex,
        table: PhaseTable
    ) -> 'WkbApproximant':
        """Forbidden region on `side` of x_ref: only the exponential decaying away from x_ref."""
        a = complex(amplitude)
        if side > 0:
            return cls(phase, x_ref, 0.0, a, table, side=1)
        return cls(phase, x_ref, a, 0.0, table, side=-1)

    def scaled(self, factor: complex) -> 'WkbApproximant':
        """Copy with both coefficients multiplied by factor (table shared)."""
        return WkbApproximant(
            self.phase,
            self.x_ref,
            self.c_plus * factor,
            self.c_minus * factor,
            self.table,
            side=self.side,
        )

    def phase_integral(self, x, kappa_x=None):
        """Φ(x) = ∫_{x_ref}^{x} κ."""
        return self.table.integral_from_start(x, kappa_x) - self._ref_integral

    def evaluate(self, x):
        x = np.asarray(x, dtype=float)
        kappa = np.asarray(self.phase.momentum(x), dtype=complex)
        exponent = self.phase_integral(x, kappa)

        value = np.zeros(np.shape(x), dtype=complex)
        # Zero coefficients are skipped so a growing exponential cannot
        # turn 0 * inf into NaN
        if self.c_plus != 0.0:
            value = value + self.c_plus * np.exp(exponent)
        if self.c_minus != 0.0:
            value = value + self.c_minus * np.exp(-exponent)
        return as_output(value / np.sqrt(kappa))

    def __call__(self, x):
        return self.evaluate(x)

    def range(self) -> Tuple[float, float]:
        return self.table.bounds

    @property
    def is_oscillating(self) -> bool:
        return self.c_plus != 0.0 and self.c_minus != 0.0

    def __repr__(self) -> str:
        kind = "oscillating" if self.is_oscillating else "decaying"
        return (
            f"WkbApproximant({kind}, x_ref={self.x_ref:.6f}, side={self.side:+d}, "
            f"c+={self.c_plus:.4g}, c-={self.c_minus:.4g})"
        )
