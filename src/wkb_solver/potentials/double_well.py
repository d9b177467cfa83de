"""
Symmetric double-well potential.

Two minima at x = ±a separated by a barrier of height V₀ at x = 0. Below
the barrier top every energy has four classical turning points, which
exercises chained amplitudes across a forbidden region.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Tuple, Union


class DoubleWellPotential:
    """
    V(x) = V₀ [(x/a)² − 1]²

    Attributes:
        V0: Barrier height.
        a: Position of the minima (±a).
    """

    def __init__(self, V0: float = 10.0, a: float = 2.0):
        """
        Initialize the double-well potential.

        Args:
            V0: Barrier height. Must be positive.
            a: Well position. Must be positive.
        """
        if V0 <= 0:
            raise ValueError(f"V0 must be positive, got {V0}")
        if a <= 0:
            raise ValueError(f"a must be positive, got {a}")

        self.V0 = V0
        self.a = a

    def __call__(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """Evaluate the potential at x."""
        return self.V0 * ((x / self.a) ** 2 - 1.0) ** 2

    def derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """
        Compute the first derivative dV/dx.

        dV/dx = 4V₀ x [(x/a)² − 1] / a²
        """
        return 4.0 * self.V0 * x * ((x / self.a) ** 2 - 1.0) / self.a ** 2

    def second_derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        """
        Compute the second derivative d²V/dx².

        d²V/dx² = 4V₀ [3(x/a)² − 1] / a²
        """
        return 4.0 * self.V0 * (3.0 * (x / self.a) ** 2 - 1.0) / self.a ** 2

    @property
    def well_positions(self) -> NDArray[np.floating]:
        return np.array([-self.a, self.a])

    @property
    def barrier_height(self) -> float:
        return self.V0

    def classical_turning_points(self, energy: float) -> Tuple[float, ...]:
        """
        Positions where V(x) = E, sorted ascending.

        (x/a)² = 1 ± √(E/V₀): four points below the barrier top, two above.

        Raises:
            ValueError: E is negative.
        """
        if energy < 0:
            raise ValueError(f"energy must be >= 0 (the potential minimum), got {energy}")
        root = np.sqrt(energy / self.V0)
        outer = self.a * np.sqrt(1.0 + root)
        if energy == 0.0:
            return (-self.a, self.a)
        if root >= 1.0:
            return (-outer, outer)
        inner = self.a * np.sqrt(1.0 - root)
        return (-outer, -inner, inner, outer)

    def __repr__(self) -> str:
        return f"DoubleWellPotential(V0={self.V0}, a={self.a})"
