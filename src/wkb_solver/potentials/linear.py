"""
Linear ramp potential: the exact Airy problem.
"""

import numpy as np
from numpy.typing import NDArray
from typing import Tuple, Union


class LinearPotential:
    """
    V(x) = F·x + V₁

    Has a single turning point at every energy; the exact solution
    decaying into the forbidden side is Ai.

    Attributes:
        slope: Force constant F (non-zero).
        offset: Constant shift V₁.
    """

    def __init__(self, slope: float = 1.0, offset: float = 0.0):
        if slope == 0:
            raise ValueError("slope must be non-zero")
        self.slope = slope
        self.offset = offset

    def __call__(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        return self.slope * x + self.offset

    def derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        return self.slope * np.ones_like(np.asarray(x, dtype=float))

    def second_derivative(
        self,
        x: Union[float, NDArray[np.floating]]
    ) -> Union[float, NDArray[np.floating]]:
        return np.zeros_like(np.asarray(x, dtype=float))

    def classical_turning_points(self, energy: float) -> Tuple[float, ...]:
        """The single position where V(x) = E."""
        return ((energy - self.offset) / self.slope,)

    def __repr__(self) -> str:
        return f"LinearPotential(slope={self.slope}, offset={self.offset})"
