"""
Root finding: Newton, bracketing, regula falsi and zero deflation.

Failure semantics:
    - newton() raises ZeroDivisionError on a vanishing derivative. Callers
      use it only where a root is known to exist.
    - newton_bounded(), DeflatingZeroFinder.next_zero() and make_guess()
      return None instead of failing, so callers can retry with another
      seed or accept fewer roots.

The deflating finder is what makes turning-point detection work: after
each zero is found the search function is divided by (x - z)^m, so
Newton cannot converge to the same zero again.
"""

import numpy as np
from typing import Callable, List, Optional, Tuple

from wkb_solver.core.constants import MAX_WORKERS, TRAPEZE_PER_THREAD
from wkb_solver.numerics.derivative import derivative
from wkb_solver.numerics.integrate import parallel_map, chunk_slices


def newton(f: Callable[[float], float], guess: float, precision: float) -> float:
    """
    Newton's method without an iteration cap.

    Iterates guess -= f(guess)/f'(guess) until the step is smaller than
    precision and returns the iterate at which that step was measured.

    Raises:
        ZeroDivisionError: the derivative vanishes at an iterate.
        FloatingPointError: the step is not finite (NaN/inf).
    """
    guess = np.float64(guess)
    with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
        while True:
            deriv = derivative(f, guess)

            if deriv == 0.0:
                raise ZeroDivisionError(
                    f"Division by zero: derivative vanishes at x = {float(guess)}"
                )

            step = f(guess) / deriv
            if not np.isfinite(step):
                raise FloatingPointError(
                    f"Newton step is not finite at x = {float(guess)} (step = {step})"
                )
            if abs(step) < precision:
                return float(guess)
            guess -= step


def newton_bounded(
    f: Callable[[float], float],
    guess: float,
    precision: float,
    max_iters: int
) -> Optional[float]:
    """
    Newton's method with an iteration cap.

    Returns:
        The root, or None when the derivative vanishes (or is not finite)
        or max_iters is exhausted.
    """
    guess = np.float64(guess)
    with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
        for _ in range(max_iters):
            deriv = derivative(f, guess)
            if deriv == 0.0 or not np.isfinite(deriv):
                return None
            step = f(guess) / deriv
            if abs(step) < precision:
                return float(guess)
            guess -= step
    return None


def _check_sign(initial: float, new: float) -> bool:
    """True when new lies on the other side of zero from initial."""
    if initial == new:
        return False
    return (initial <= -0.0 and new >= 0.0) or (initial >= 0.0 and new <= 0.0)


def bracket_sign_change(
    f: Callable[[float], float],
    guess: float,
    step: float,
    max_steps: Optional[int] = None
) -> Tuple[float, float]:
    """
    Walk from guess in increments of step until f changes sign.

    An exact zero counts as a crossing from either side.

    Args:
        f: Function to scan.
        guess: Starting position.
        step: Signed increment.
        max_steps: Optional bound on the number of increments.

    Returns:
        (x - step, x) where x is the first position past the crossing.

    Raises:
        RuntimeError: max_steps was given and no crossing was found.
    """
    initial = f(guess)
    result = guess
    steps = 0
    while not _check_sign(initial, f(result)):
        result += step
        steps += 1
        if max_steps is not None and steps > max_steps:
            raise RuntimeError(
                f"No sign change found within {max_steps} steps of {step} from {guess}"
            )
    return (result - step, result)


def _regula_falsi_c(f: Callable[[float], float], a: float, b: float) -> float:
    fa = f(a)
    fb = f(b)
    if fb == fa:
        raise ZeroDivisionError(f"Degenerate secant: f({a}) == f({b}) == {fa}")
    return (a * fb - b * fa) / (fb - fa)


def regula_falsi(
    f: Callable[[float], float],
    a: float,
    b: float,
    precision: float,
    max_iters: Optional[int] = None
) -> float:
    """
    False-position refinement of a zero between a and b.

    Each iteration moves both endpoints to secant intercepts and stops
    once |f(c)| <= precision.

    Raises:
        ZeroDivisionError: the secant degenerates (f(a) == f(b)).
        RuntimeError: max_iters was given and is exhausted.
    """
    if a > b:
        a, b = b, a

    c = _regula_falsi_c(f, a, b)
    iters = 0
    while abs(f(c)) > precision:
        if max_iters is not None and iters >= max_iters:
            raise RuntimeError(
                f"regula_falsi did not converge in {max_iters} iterations (last c = {c})"
            )
        b = _regula_falsi_c(f, a, b)
        a = _regula_falsi_c(f, a, b)
        c = _regula_falsi_c(f, a, b)
        iters += 1
    return float(c)


def bracket_then_refine(
    f: Callable[[float], float],
    guess: float,
    step: float,
    precision: float,
    max_steps: Optional[int] = None,
    max_iters: Optional[int] = None
) -> float:
    """Locate an isolated zero from one seed: bracket, then regula falsi."""
    a, b = bracket_sign_change(f, guess, step, max_steps=max_steps)
    return regula_falsi(f, a, b, precision, max_iters=max_iters)


class DeflatingZeroFinder:
    """
    Newton search that avoids converging to zeros it has already found.

    Known zeros are divided out of the search function:

        modified(x) = f(x) / Π (x − zᵢ)^{mᵢ}

    A zero at which the modified function is also flat (|d/dx| below
    precision) is a tangential root and gets multiplicity 2, so the
    extremum is not found a second time.

    The accumulated zero list belongs to one detection pass; create a new
    finder for every pass.

    Attributes:
        f: Function whose zeros are searched.
        precision: Newton precision and flatness threshold.
        max_iters: Iteration cap for each search.
    """

    def __init__(self, f: Callable, precision: float, max_iters: int):
        self.f = f
        self.precision = precision
        self.max_iters = max_iters
        self._previous_zeros: List[Tuple[int, float]] = []

    def modified_function(self, x):
        """Evaluate f with all known zeros divided out (vectorised)."""
        divisor = 1.0
        for multiplicity, zero in self._previous_zeros:
            divisor = divisor * (x - zero) ** multiplicity
        divisor = np.where(divisor == 0.0, divisor + self.precision, divisor)
        result = self.f(x) / divisor
        if np.ndim(result) == 0:
            return result[()] if isinstance(result, np.ndarray) else result
        return result

    def __call__(self, x):
        return self.modified_function(x)

    def next_zero(self, guess: float) -> Optional[float]:
        """
        Search for a new zero starting from guess.

        A zero within sqrt(precision) of one already recorded counts as a
        failure: dividing out an approximate zero leaves a root/pole pair
        that Newton can land on again.

        Returns:
            The zero (recorded in the deflation state), or None.
        """
        zero = newton_bounded(self.modified_function, guess, self.precision, self.max_iters)

        if zero is not None and self.is_known(zero):
            return None

        if zero is not None:
            # Extrema that touch zero are recorded twice
            with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
                slope = derivative(self.modified_function, zero)
            if abs(slope) < self.precision:
                self._previous_zeros.append((2, zero))
            else:
                self._previous_zeros.append((1, zero))

        return zero

    def is_known(self, x: float) -> bool:
        """True if x coincides with a recorded zero (within sqrt(precision))."""
        tolerance = np.sqrt(self.precision)
        return any(abs(x - z) <= tolerance for _, z in self._previous_zeros)

    @property
    def previous_zeros(self) -> List[float]:
        """Zeros found so far, in discovery order."""
        return [z for _, z in self._previous_zeros]

    @property
    def zeros_with_multiplicity(self) -> List[Tuple[int, float]]:
        """(multiplicity, zero) pairs in discovery order."""
        return list(self._previous_zeros)

    def __len__(self) -> int:
        return len(self._previous_zeros)

    def __repr__(self) -> str:
        return (
            f"DeflatingZeroFinder(precision={self.precision:.1e}, "
            f"max_iters={self.max_iters}, zeros={self.previous_zeros})"
        )


def make_guess(
    f: Callable,
    interval: Tuple[float, float],
    n: int,
    chunk_size: int = TRAPEZE_PER_THREAD,
    max_workers: Optional[int] = MAX_WORKERS
) -> Optional[float]:
    """
    Heuristic seed for the next zero search.

    Samples |f(x) / (1 − exp(−f'(x)²))| at x = start + i·(end − start)/n,
    i = 0..n−1, and returns the position of the smallest value. The
    denominator suppresses flat stretches of f, which steers the search
    away from plateaus that have already been explored.

    f must accept numpy arrays. Chunks of the grid are evaluated in
    parallel.

    Returns:
        The best position, or None if no sample is finite.
    """
    if n <= 0:
        return None
    start, end = interval
    x = np.linspace(start, end, n, endpoint=False)

    def score(s: slice):
        xs = x[s]
        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            der = derivative(f, xs)
            return np.abs(f(xs) / (-np.exp(-der * der) + 1.0))

    y = np.concatenate(parallel_map(score, chunk_slices(n, chunk_size), max_workers))
    y = np.where(np.isnan(y), np.inf, y)
    if not np.any(np.isfinite(y)):
        return None
    return float(x[int(np.argmin(y))])
