"""
Wavefunction parts and the smooth joint between two approximants.

A part is anything with evaluate(x) and a half-open range [lo, hi).
The assembled wavefunction is an ordered list of parts; evaluation picks
the first part whose range contains x.
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, Tuple


def is_in_range(bounds: Tuple[float, float], x):
    """lo <= x < hi (vectorised)."""
    lo, hi = bounds
    result = (lo <= np.asarray(x)) & (np.asarray(x) < hi)
    if np.ndim(result) == 0:
        return bool(result)
    return result


def as_output(value):
    """Python complex for scalar results, complex array otherwise."""
    if np.ndim(value) == 0:
        return complex(value)
    return np.asarray(value, dtype=complex)


class WaveFunctionPart(ABC):
    """
    Piece of a wavefunction valid on range().

    Subclasses implement evaluate() for scalars and numpy arrays.
    """

    @abstractmethod
    def evaluate(self, x):
        """Wavefunction value(s) at x."""

    @abstractmethod
    def range(self) -> Tuple[float, float]:
        """Half-open validity range [lo, hi)."""

    def __call__(self, x):
        return self.evaluate(x)

    def contains(self, x):
        return is_in_range(self.range(), x)


def _chi(t):
    """Blend weight sin²(tπ/2); 0 at t=0, 1 at t=1."""
    return np.sin(t * np.pi / 2.0) ** 2


class Joint(WaveFunctionPart):
    """
    Smooth blend between two approximants across a band.

    With delta > 0 the band is [cut, cut + delta) and the value goes from
    left (at cut) to right (at cut + delta). With delta < 0 the band is
    [cut + delta, cut) and the roles are swapped: the value equals right
    at cut and left at cut + delta.

    Attributes:
        left: Approximant entering from the left.
        right: Approximant entering from the right.
        cut: Anchor position of the band.
        delta: Signed, non-zero band width.
    """

    def __init__(self, left: Callable, right: Callable, cut: float, delta: float):
        if delta == 0.0:
            raise ValueError("Joint width delta must be non-zero")
        self.left = left
        self.right = right
        self.cut = float(cut)
        self.delta = float(delta)

    def range(self) -> Tuple[float, float]:
        if self.delta > 0.0:
            return (self.cut, self.cut + self.delta)
        return (self.cut + self.delta, self.cut)

    def evaluate(self, x):
        if self.delta > 0.0:
            start, end = self.left, self.right
        else:
            start, end = self.right, self.left

        t = np.clip(np.abs(np.asarray(x, dtype=float) - self.cut) / abs(self.delta), 0.0, 1.0)
        start_val = start(x)
        return as_output(start_val + (end(x) - start_val) * _chi(t))

    def __repr__(self) -> str:
        lo, hi = self.range()
        return f"Joint(range=[{lo:.6f}, {hi:.6f}), delta={self.delta:+.6f})"
