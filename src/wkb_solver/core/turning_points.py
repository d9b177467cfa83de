"""
Turning-point detection.

WKB breaks down where the potential varies quickly compared to the local
wavelength. The validity function

    v(x) = ħ/√(2m)·|U'(x)| − (U(x) − E)²

is positive exactly in those regions: around every classical turning
point (U = E) there is an interval (t₁, t₂) with v > 0, where the Airy
approximation takes over. The interval ends are found as zeros of v with
a deflating Newton search; the turning point itself is the zero of E − U
between them.
"""

import numpy as np
from typing import Callable, Iterator, List, Optional, Tuple

from wkb_solver.core.phase import Phase
from wkb_solver.core.parameters import WKBParameters
from wkb_solver.numerics.derivative import derivative, derivative_function
from wkb_solver.numerics.roots import (
    DeflatingZeroFinder,
    bracket_then_refine,
    make_guess,
    newton,
)

# Precision of the final Newton solve for U(x) = E
TURNING_POINT_PRECISION = 1e-7


Bracket = Tuple[float, float]


class TurningPointGroup:
    """
    Ordered turning points with their Airy brackets.

    Each entry is ((t₁, t₂), x_t) with t₁ < x_t < t₂; entries are sorted
    by position. Built once per (phase, view) and then read only.
    """

    def __init__(self, entries: Optional[List[Tuple[Bracket, float]]] = None):
        self._entries: List[Tuple[Bracket, float]] = []
        for bracket, turning_point in entries or []:
            self.add(bracket, turning_point)

    def add(self, bracket: Bracket, turning_point: float):
        t1, t2 = float(bracket[0]), float(bracket[1])
        self._entries.append(((t1, t2), float(turning_point)))

    @property
    def brackets(self) -> List[Bracket]:
        return [bracket for bracket, _ in self._entries]

    @property
    def turning_points(self) -> List[float]:
        return [tp for _, tp in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[Bracket, float]]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Tuple[Bracket, float]:
        return self._entries[index]

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        inner = ", ".join(
            f"(({t1:.6f}, {t2:.6f}), {tp:.6f})" for (t1, t2), tp in self._entries
        )
        return f"TurningPointGroup([{inner}])"


def validity_function(phase: Phase) -> Callable:
    """
    Build v(x) = ħ/√(2m)·|U'(x)| − (U(x) − E)² for a phase.

    The returned callable is vectorised if the potential is.
    """
    prefactor = phase.hbar / np.sqrt(2.0 * phase.mass)
    slope = derivative_function(phase.potential)

    def valid(x):
        return (
            prefactor * np.abs(slope(x))
            - (phase.potential(x) - phase.energy) ** 2
        )

    return valid


def find_zeros(
    phase: Phase,
    view: Tuple[float, float],
    params: Optional[WKBParameters] = None
) -> List[float]:
    """
    Zeros of the validity function strictly inside view.

    Repeats (guess on the deflated function, deflating Newton search) up
    to params.max_turning_points times. A failed round does not change the
    deflation state, so the search ends at the first failure.

    Returns:
        Zeros in discovery order.
    """
    params = params or WKBParameters()
    finder = DeflatingZeroFinder(
        validity_function(phase), params.accuracy, params.max_newton_iters
    )

    for _ in range(params.max_turning_points):
        guess = make_guess(
            finder.modified_function,
            view,
            params.guess_points,
            params.trapeze_per_thread,
            params.max_workers,
        )
        if guess is None:
            break
        if finder.next_zero(guess) is None:
            break

    lo, hi = min(view), max(view)
    return [z for z in finder.previous_zeros if lo < z < hi]


def _sign_of_validity_slope(valid: Callable, x: float) -> float:
    return float(np.sign(derivative(valid, x)))


def _synthesize_boundary(
    valid: Callable,
    start: float,
    direction: float,
    wanted_sign: float,
    params: WKBParameters
) -> Tuple[float, float]:
    """
    Scan outward from start for the next zero of v with the wanted slope.

    Used when the view cuts through a region where v > 0 so that the
    bracket's outer boundary was never found.
    """
    step = direction * np.sqrt(params.accuracy)
    guess = start + step
    while True:
        zero = bracket_then_refine(
            valid, guess, step, params.accuracy, max_steps=params.boundary_scan_limit
        )
        sign = _sign_of_validity_slope(valid, zero)
        if sign == wanted_sign:
            return sign, zero
        guess = zero + step


def group_turning_points(
    zeros: List[float],
    phase: Phase,
    params: Optional[WKBParameters] = None
) -> TurningPointGroup:
    """
    Pair validity zeros into brackets and locate the turning point in each.

    Args:
        zeros: Zeros of the validity function (any order).
        phase: Physical configuration.
        params: Solver parameters.

    Returns:
        TurningPointGroup sorted by position.

    Raises:
        RuntimeError: the zeros cannot be paired into (rising, falling)
            brackets.
    """
    params = params or WKBParameters()
    valid = validity_function(phase)

    signed = [(_sign_of_validity_slope(valid, z), float(z)) for z in sorted(zeros)]

    if signed and signed[0][0] < 0.0:
        signed.insert(0, _synthesize_boundary(valid, signed[0][1], -1.0, 1.0, params))

    if signed and signed[-1][0] > 0.0:
        signed.append(_synthesize_boundary(valid, signed[-1][1], 1.0, -1.0, params))

    if len(signed) % 2 != 0:
        raise RuntimeError(
            f"Odd number of validity zeros ({len(signed)}); cannot pair brackets: "
            f"{[z for _, z in signed]}"
        )

    group = TurningPointGroup()
    for i in range(0, len(signed), 2):
        (sign1, t1), (sign2, t2) = signed[i], signed[i + 1]
        if not (sign1 > 0.0 and sign2 < 0.0):
            raise RuntimeError(
                f"Bracket ({t1}, {t2}) has slope signs ({sign1:+.0f}, {sign2:+.0f}); "
                f"expected (+, -)"
            )
        turning_point = newton(
            lambda x: phase.energy - phase.potential(x),
            (t1 + t2) / 2.0,
            TURNING_POINT_PRECISION,
        )
        group.add((t1, t2), turning_point)

    return group


def calc_turning_points(
    phase: Phase,
    view: Tuple[float, float],
    params: Optional[WKBParameters] = None,
    verbose: bool = False
) -> TurningPointGroup:
    """
    Detect all turning points of phase inside view.

    Args:
        phase: Physical configuration.
        view: Search interval.
        params: Solver parameters.
        verbose: Print zeros and turning points.

    Returns:
        TurningPointGroup (possibly empty).
    """
    zeros = find_zeros(phase, view, params)
    if verbose:
        print(f"  Validity zeros: {sorted(zeros)}")

    group = group_turning_points(zeros, phase, params)
    if verbose:
        print(f"  Turning points: {group.turning_points}")
        print(f"  Airy brackets: {group.brackets}")
    return group
