"""
Phase: the immutable physical configuration shared by all approximants.

A Phase bundles the energy, the mass, the potential and the phase offset
used when WKB segments are matched across a turning point. Every WKB and
Airy segment built for one wavefunction references the same Phase.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable

from wkb_solver.core.constants import H_BAR


@dataclass(frozen=True)
class Phase:
    """
    Physical configuration of one bound state.

    Attributes:
        energy: Eigen-energy E.
        mass: Particle mass m (> 0).
        potential: Vectorised potential U(x).
        phase_off: Phase offset of the oscillating WKB solution (π/4 for a
            smooth turning point).
        hbar: Reduced Planck constant.
    """
    energy: float
    mass: float
    potential: Callable
    phase_off: float = np.pi / 4.0
    hbar: float = H_BAR

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if self.hbar <= 0:
            raise ValueError(f"hbar must be positive, got {self.hbar}")

    def momentum(self, x):
        """
        Local WKB exponent rate κ(x) = sqrt(2m(U(x) − E)) / ħ.

        Evaluated on the principal complex branch: real and positive in
        classically forbidden regions, +i·k in allowed regions.
        """
        value = np.sqrt(
            np.asarray(2.0 * self.mass * (self.potential(x) - self.energy), dtype=complex)
        ) / self.hbar
        if np.ndim(value) == 0:
            return complex(value)
        return value

    def __call__(self, x):
        return self.momentum(x)

    def with_phase_off(self, phase_off: float) -> 'Phase':
        """Copy of this phase with a different phase offset."""
        return Phase(
            energy=self.energy,
            mass=self.mass,
            potential=self.potential,
            phase_off=phase_off,
            hbar=self.hbar,
        )

    def __repr__(self) -> str:
        return (
            f"Phase(energy={self.energy:.9f}, mass={self.mass:.4f}, "
            f"phase_off={self.phase_off:.4f}, potential={self.potential!r})"
        )
