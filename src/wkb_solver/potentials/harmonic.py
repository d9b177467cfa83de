"""
Harmonic oscillator potential.

The WKB quantisation condition is exact for this potential, which makes
it the reference case for energies and normalisation.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Tuple, Union


class HarmonicPotential:
    """
    V(x) = ½ m ω² (x − x₀)²

    Attributes:
        omega: Angular frequency ω.
        mass: Mass m entering the spring constant.
        center: Position of the minimum x₀.
    """

    def __init__(self, omega: float = 1.0, mass: float = 1.0, center: float = 0.0):
        """
        Initialize the harmonic potential.

        Args:
            omega: Angular frequency. Must be positive.
            mass: Mass. Must be positive.
            center: Position of the minimum.
        """
        if omega <= 0:
            raise ValueError(f"omega must be positive, got {omega}")
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")

        self.omega = omega
        self.mass = mass
        self.center = center

    @property
    def spring_constant(self) -> float:
        return self.mass * self.omega ** 2

    def __call__(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """Evaluate the potential at x."""
        return 0.5 * self.spring_constant * (x - self.center) ** 2

    def derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """dV/dx = m ω² (x − x₀)"""
        return self.spring_constant * (x - self.center)

    def second_derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """d²V/dx² = m ω²"""
        return self.spring_constant * np.ones_like(np.asarray(x, dtype=float))

    def energy_level(self, n: int, hbar: float = 1.0) -> float:
        """Exact eigen-energy ħω(n + ½)."""
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return hbar * self.omega * (n + 0.5)

    def classical_turning_points(self, energy: float) -> Tuple[float, ...]:
        """
        Positions where V(x) = E.

        Raises:
            ValueError: E is below the minimum of the potential.
        """
        if energy < 0:
            raise ValueError(f"energy must be >= 0 (the potential minimum), got {energy}")
        half_width = np.sqrt(2.0 * energy / self.spring_constant)
        if half_width == 0.0:
            return (self.center,)
        return (self.center - half_width, self.center + half_width)

    def __repr__(self) -> str:
        return f"HarmonicPotential(omega={self.omega}, mass={self.mass}, center={self.center})"
