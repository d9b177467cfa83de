"""
Airy approximant near a turning point.

Close to a turning point x_t the potential is linear,
U(x) ≈ E + U'(x_t)(x − x_t), and the Schrödinger equation becomes Airy's
equation in z = ∛u₁ (x − x_t) with u₁ = 2m U'(x_t)/ħ². The local
solution c_a·Ai(z) + c_b·Bi(z) bridges the interval (t₁, t₂) where WKB
is invalid; c_a and c_b are fixed by matching the neighbouring WKB
approximants at t₁ and t₂.
"""

import numpy as np
from scipy.special import airy
from typing import Callable, Optional, Tuple

from wkb_solver.core.phase import Phase
from wkb_solver.numerics.derivative import derivative_function
from wkb_solver.wavefunction.joint import as_output

_OMEGA = np.exp(2j * np.pi / 3.0)
_BI_PHASE = np.exp(1j * np.pi / 6.0)


def airy_ai(z):
    """Complex Airy function Ai(z)."""
    ai, _, _, _ = airy(np.asarray(z, dtype=complex))
    return ai


def airy_bi(z):
    """
    Complex Airy function Bi(z) from Ai alone.

    Bi(z) = −i·Ai(z) + 2·Ai(z·e^{2πi/3})·e^{iπ/6}
    """
    z = np.asarray(z, dtype=complex)
    return -1j * airy_ai(z) + 2.0 * airy_ai(z * _OMEGA) * _BI_PHASE


def signed_cbrt(value: float) -> float:
    """Real cube root keeping the sign."""
    return float(np.sign(value) * abs(value) ** (1.0 / 3.0))


class AiryApproximant:
    """
    c_a·Ai(z) + c_b·Bi(z) around one turning point.

    Attributes:
        phase: Shared physical configuration.
        turning_point: x_t with U(x_t) = E.
        bracket: (t₁, t₂), the interval where this approximant is used.
        u_1: 2m·U'(x_t)/ħ².
        c_a: Ai coefficient.
        c_b: Bi coefficient.
    """

    def __init__(
        self,
        phase: Phase,
        turning_point: float,
        bracket: Tuple[float, float],
        c_a: complex = 1.0,
        c_b: complex = 0.0,
        u_1: Optional[float] = None
    ):
        self.phase = phase
        self.turning_point = float(turning_point)
        self.bracket = (float(bracket[0]), float(bracket[1]))
        if u_1 is None:
            slope = derivative_function(phase.potential)(self.turning_point)
            u_1 = 2.0 * phase.mass * float(slope) / phase.hbar ** 2
        self.u_1 = float(u_1)
        self.c_a = complex(c_a)
        self.c_b = complex(c_b)

    def z(self, x):
        """Scaled Airy coordinate ∛u₁ (x − x_t)."""
        return signed_cbrt(self.u_1) * (np.asarray(x, dtype=float) - self.turning_point)

    def basis(self, x) -> Tuple:
        """(Ai(z(x)), Bi(z(x)))."""
        z = self.z(x)
        return airy_ai(z), airy_bi(z)

    def evaluate(self, x):
        ai, bi = self.basis(x)
        return as_output(self.c_a * ai + self.c_b * bi)

    def __call__(self, x):
        return self.evaluate(x)

    def range(self) -> Tuple[float, float]:
        return self.bracket

    def with_coefficients(self, c_a: complex, c_b: complex) -> 'AiryApproximant':
        return AiryApproximant(
            self.phase, self.turning_point, self.bracket, c_a, c_b, u_1=self.u_1
        )

    def match(self, left: Callable, right: Callable) -> 'AiryApproximant':
        """
        Fit the coefficients so the segment agrees with left at t₁ and right at t₂.

        Solves [Ai(z₁) Bi(z₁); Ai(z₂) Bi(z₂)]·(c_a, c_b) = (left(t₁), right(t₂))
        by Cramer's rule.

        Raises:
            ZeroDivisionError: the system is singular.
        """
        t1, t2 = self.bracket
        ai1, bi1 = (complex(v) for v in self.basis(t1))
        ai2, bi2 = (complex(v) for v in self.basis(t2))
        target1 = complex(left(t1))
        target2 = complex(right(t2))

        det = ai1 * bi2 - bi1 * ai2
        if det == 0.0:
            raise ZeroDivisionError(
                f"Singular Airy matching system on bracket ({t1}, {t2})"
            )
        c_a = (target1 * bi2 - bi1 * target2) / det
        c_b = (ai1 * target2 - target1 * ai2) / det
        return self.with_coefficients(c_a, c_b)

    def __repr__(self) -> str:
        t1, t2 = self.bracket
        return (
            f"AiryApproximant(x_t={self.turning_point:.6f}, bracket=({t1:.6f}, {t2:.6f}), "
            f"u_1={self.u_1:.4g}, c_a={self.c_a:.4g}, c_b={self.c_b:.4g})"
        )
