"""
Wavefunction assembly.

A WaveFunction is built from the turning points of a potential at a
given energy:

    1. Each turning point gets a WKB approximant on both sides
       (oscillating where the region is classically allowed, decaying
       where it is forbidden).
    2. Amplitudes are chained left to right so neighbouring turning
       points describe the same state in the region between them.
    3. An Airy segment covers the bracket around each turning point,
       matched to both WKB neighbours; two joints blend Airy and WKB.
    4. The result is optionally scaled or renormalised so ∫|ψ|² = 1.

Evaluation walks the ordered parts and uses the first one whose range
contains x.
"""

import warnings
import numpy as np
from enum import Enum
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from wkb_solver.core.constants import NUMBER_OF_POINTS, SQRT_EPSILON
from wkb_solver.core.energy import nth_energy
from wkb_solver.core.parameters import WKBParameters
from wkb_solver.core.phase import Phase
from wkb_solver.core.turning_points import TurningPointGroup, calc_turning_points
from wkb_solver.numerics.derivative import derivative_function
from wkb_solver.numerics.integrate import (
    SampledPoints,
    evaluate_function_between,
    integrate,
    parallel_map,
)
from wkb_solver.numerics.roots import newton_bounded
from wkb_solver.wavefunction.airy import AiryApproximant
from wkb_solver.wavefunction.joint import Joint, WaveFunctionPart, as_output, is_in_range
from wkb_solver.wavefunction.wkb import PhaseTable, WkbApproximant

# Automatic view detection (Newton on U - E from both outer bounds)
VIEW_NEWTON_PRECISION = 1e-7
VIEW_NEWTON_MAX_ITERS = 100000


class ScalingType(Enum):
    """How the assembled wavefunction is scaled."""
    MUL = "mul"
    RENORMALIZE = "renormalize"
    NONE = "none"


@dataclass(frozen=True)
class Scaling:
    """
    Scaling request.

    MUL multiplies by factor; RENORMALIZE multiplies by factor/√∫|ψ|²;
    NONE leaves ψ unscaled.
    """
    kind: ScalingType
    factor: complex = 1.0

    @classmethod
    def mul(cls, factor: complex) -> 'Scaling':
        return cls(ScalingType.MUL, complex(factor))

    @classmethod
    def renormalize(cls, factor: complex = 1.0) -> 'Scaling':
        return cls(ScalingType.RENORMALIZE, complex(factor))

    @classmethod
    def none(cls) -> 'Scaling':
        return cls(ScalingType.NONE, 1.0 + 0j)


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', ..."""
    if 10 <= n % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(n % 10, 'th')
    return f"{n}{suffix}"


def _piecewise(x: np.ndarray, branches: Sequence[Tuple[np.ndarray, Callable]]) -> np.ndarray:
    """Evaluate each branch only on its own (disjoint) mask."""
    result = np.zeros(x.shape, dtype=complex)
    for mask, func in branches:
        if np.any(mask):
            result[mask] = func(x[mask])
    return result


class PureWkb(WaveFunctionPart):
    """A WKB approximant restricted to a range."""

    def __init__(self, wkb: WkbApproximant, bounds: Tuple[float, float]):
        self.wkb = wkb
        self.bounds = (float(bounds[0]), float(bounds[1]))

    def evaluate(self, x):
        return self.wkb.evaluate(x)

    def range(self) -> Tuple[float, float]:
        return self.bounds

    def __repr__(self) -> str:
        return f"PureWkb(range=[{self.bounds[0]:.6f}, {self.bounds[1]:.6f}))"


class ApproxPart(WaveFunctionPart):
    """
    Everything around one turning point: two WKB approximants, the Airy
    segment between them and the two joints.

    Lookup order: left joint band, right joint band, Airy bracket, then
    the WKB on the side of the turning point that x falls on.
    """

    def __init__(
        self,
        airy: AiryApproximant,
        wkb_left: WkbApproximant,
        wkb_right: WkbApproximant,
        bounds: Tuple[float, float],
        transition_fraction: float,
        enable_joints: bool = True
    ):
        self.airy = airy
        self.wkb_left = wkb_left
        self.wkb_right = wkb_right
        self.bounds = (float(bounds[0]), float(bounds[1]))
        self.enable_joints = enable_joints

        t1, t2 = airy.bracket
        delta = (t2 - t1) * transition_fraction
        self.joint_l = Joint(left=wkb_left, right=airy, cut=t1 + delta / 2.0, delta=-delta)
        self.joint_r = Joint(left=airy, right=wkb_right, cut=t2 - delta / 2.0, delta=delta)

    @property
    def turning_point(self) -> float:
        return self.airy.turning_point

    def _wkb(self, x):
        if x < self.turning_point:
            return self.wkb_left.evaluate(x)
        return self.wkb_right.evaluate(x)

    def evaluate(self, x):
        if np.ndim(x) == 0:
            x = float(x)
            if self.enable_joints and self.joint_l.contains(x):
                return self.joint_l.evaluate(x)
            if self.enable_joints and self.joint_r.contains(x):
                return self.joint_r.evaluate(x)
            if is_in_range(self.airy.bracket, x):
                return self.airy.evaluate(x)
            return self._wkb(x)

        x = np.asarray(x, dtype=float)
        remaining = np.ones(x.shape, dtype=bool)
        branches = []
        candidates = []
        if self.enable_joints:
            candidates += [
                (self.joint_l.contains(x), self.joint_l.evaluate),
                (self.joint_r.contains(x), self.joint_r.evaluate),
            ]
        candidates.append((is_in_range(self.airy.bracket, x), self.airy.evaluate))
        candidates.append((x < self.turning_point, self.wkb_left.evaluate))
        candidates.append((np.ones(x.shape, dtype=bool), self.wkb_right.evaluate))

        for mask, func in candidates:
            mask = remaining & mask
            branches.append((mask, func))
            remaining &= ~mask
        return _piecewise(x, branches)

    def range(self) -> Tuple[float, float]:
        return self.bounds

    def __repr__(self) -> str:
        return (
            f"ApproxPart(x_t={self.turning_point:.6f}, "
            f"range=[{self.bounds[0]:.6f}, {self.bounds[1]:.6f}), "
            f"airy={self.airy.bracket})"
        )


def renormalize_factor(
    func: Callable,
    approx_inf: Optional[Tuple[float, float]] = None,
    params: Optional[WKBParameters] = None,
    scale: complex = 1.0
) -> complex:
    """
    scale / √∫|func|² over approx_inf.

    func must be vectorised. A zero area cannot be normalised: a
    RuntimeWarning is issued and scale is returned unchanged.
    """
    params = params or WKBParameters()
    if approx_inf is None:
        approx_inf = params.approx_inf
    lo, hi = approx_inf

    # Same half-open [lo, hi) the assembled parts cover
    samples = evaluate_function_between(
        func,
        lo,
        float(np.nextafter(hi, lo)),
        params.integ_steps,
        params.trapeze_per_thread,
        params.max_workers,
    )
    area = float(np.real(integrate(
        samples.map_values(lambda y: np.abs(y) ** 2),
        params.trapeze_per_thread,
        params.max_workers,
    )))

    if area == 0.0:
        warnings.warn("Can't renormalize, area under |psi|^2 is 0.", RuntimeWarning)
        return complex(scale)
    return complex(scale) / np.sqrt(area)


class ScaledFunction:
    """func multiplied by a constant factor."""

    def __init__(self, func: Callable, scale: complex):
        self.func = func
        self.scale = complex(scale)

    def __call__(self, x):
        return as_output(self.scale * np.asarray(self.func(x)))


def renormalize(
    func: Callable,
    approx_inf: Optional[Tuple[float, float]] = None,
    params: Optional[WKBParameters] = None
) -> ScaledFunction:
    """Wrap func so that ∫|func|² over approx_inf is 1."""
    return ScaledFunction(func, renormalize_factor(func, approx_inf, params))


class WaveFunction:
    """
    Piecewise WKB/Airy approximation of one bound state.

    Args:
        potential: Vectorised potential U(x).
        mass: Particle mass (> 0).
        n_energy: Quantum number; the energy is then taken from the
            Bohr-Sommerfeld condition. Ignored when energy is given.
        approx_inf: Outer bounds standing in for ±infinity.
        view_factor: Relative widening of the automatically detected view.
        scaling: Scaling request (default: renormalise to 1).
        energy: Energy to use directly.
        view: Interval searched for turning points; detected from the
            classical turning points when omitted.
        params: Solver parameters.
        verbose: Print progress.

    Raises:
        ValueError: neither n_energy nor energy is given, or x lies
            outside every part on evaluation.
        RuntimeError: the turning points cannot be paired.
    """

    def __init__(
        self,
        potential: Callable,
        mass: float,
        n_energy: Optional[int] = None,
        approx_inf: Optional[Tuple[float, float]] = None,
        view_factor: Optional[float] = None,
        scaling: Optional[Scaling] = None,
        energy: Optional[float] = None,
        view: Optional[Tuple[float, float]] = None,
        params: Optional[WKBParameters] = None,
        verbose: bool = False
    ):
        self.params = params or WKBParameters()
        self.approx_inf = (
            tuple(float(v) for v in approx_inf) if approx_inf is not None
            else self.params.approx_inf
        )
        self.view_factor = self.params.view_factor if view_factor is None else view_factor
        self.n_energy = n_energy
        self.verbose = verbose
        scaling = scaling or Scaling.renormalize()

        if energy is None:
            if n_energy is None:
                raise ValueError("Either n_energy or energy must be given")
            energy = nth_energy(n_energy, mass, potential, self.approx_inf, self.params)
            if verbose:
                print(f"{ordinal(n_energy)} Energy: {energy:.9f}")
        elif verbose:
            print(f"Energy: {energy:.9f}")

        self._phase = Phase(
            energy=float(energy), mass=mass, potential=potential, hbar=self.params.hbar
        )

        if view is None:
            view = self._detect_view()
        self._view = (float(min(view)), float(max(view)))
        if verbose:
            print(f"  View: ({self._view[0]:.6f}, {self._view[1]:.6f})")

        self._turning_points = calc_turning_points(
            self._phase, self._view, self.params, verbose=verbose
        )

        if self._turning_points:
            self._parts, self._airy_ranges, self._wkb_ranges = self._assemble()
        else:
            warnings.warn(
                "No turning points found in view! Results might be inaccurate.",
                RuntimeWarning,
            )
            self._parts, self._airy_ranges, self._wkb_ranges = self._assemble_pure_wkb()

        self.scaling = scaling
        if scaling.kind is ScalingType.MUL:
            self._scale = complex(scaling.factor)
        elif scaling.kind is ScalingType.NONE:
            self._scale = 1.0 + 0j
        else:
            self._scale = renormalize_factor(
                self.calc_psi, self.approx_inf, self.params, scale=scaling.factor
            )
        if verbose:
            print(f"  Parts: {len(self._parts)}, scale: {self._scale:.6g}")

    def _detect_view(self) -> Tuple[float, float]:
        """Classical turning points nearest the outer bounds, widened by view_factor."""
        def shifted(x):
            return self._phase.potential(x) - self._phase.energy

        lower = newton_bounded(
            shifted, self.approx_inf[0], VIEW_NEWTON_PRECISION, VIEW_NEWTON_MAX_ITERS
        )
        upper = newton_bounded(
            shifted, self.approx_inf[1], VIEW_NEWTON_PRECISION, VIEW_NEWTON_MAX_ITERS
        )

        if lower is not None and upper is not None:
            lower, upper = min(lower, upper), max(lower, upper)
            width = upper - lower
            if width >= SQRT_EPSILON:
                return (lower - width * self.view_factor, upper + width * self.view_factor)

        warnings.warn(
            "Failed to determine view automatically, using approx_inf as view",
            RuntimeWarning,
        )
        return (self.approx_inf[0] - SQRT_EPSILON, self.approx_inf[1] + SQRT_EPSILON)

    def _assemble_pure_wkb(self):
        inf0, inf1 = self.approx_inf
        table = PhaseTable(self._phase, self.approx_inf, self.params)
        wkb = WkbApproximant.oscillating(self._phase, inf0, 1, 1.0, table)
        center = (self._view[0] + self._view[1]) / 2.0
        parts = [PureWkb(wkb, (inf0, center)), PureWkb(wkb, (center, inf1))]
        return parts, [], [part.range() for part in parts]

    def _chain_interval(
        self,
        previous_bracket: Tuple[float, float],
        bracket: Tuple[float, float],
        x_prev: float,
        x_t: float
    ) -> Tuple[float, float]:
        """
        Stretch between two turning points where both neighbouring parts
        evaluate their plain WKB, i.e. clear of the Airy brackets and of
        the joint bands around them. Falls back to (x_prev, x_t) when the
        brackets leave no such stretch.
        """
        margin = self.params.airy_transition_fraction / 2.0 if self.params.enable_airy_joints else 0.0
        lo = previous_bracket[1] + margin * (previous_bracket[1] - previous_bracket[0])
        hi = bracket[0] - margin * (bracket[1] - bracket[0])
        if lo < hi:
            return (lo, hi)
        return (x_prev, x_t)

    def _chain(
        self,
        previous: WkbApproximant,
        unit: WkbApproximant,
        interval: Tuple[float, float],
        allowed: bool
    ) -> Tuple[float, complex]:
        """
        Part boundary x_c inside interval and amplitude C with
        C·unit(x_c) == previous(x_c).

        Forbidden regions cut at the middle of interval. Allowed regions
        cut at the sample where |previous·unit| is largest, so that
        neither factor sits near a node.
        """
        lo, hi = interval
        if allowed:
            x = np.linspace(lo, hi, max(self.params.guess_points, 2) + 2)[1:-1]
            weight = np.abs(previous(x) * unit(x))
            cut = float(x[int(np.argmax(weight))])
        else:
            cut = (lo + hi) / 2.0
        return cut, complex(previous(cut)) / complex(unit(cut))

    def _assemble(self):
        phase = self._phase
        inf0, inf1 = self.approx_inf
        brackets = self._turning_points.brackets
        points = self._turning_points.turning_points
        slope = derivative_function(phase.potential)

        # Tables between consecutive turning points are shared by the two
        # approximants that meet there
        edges = [inf0] + points + [inf1]
        tables = [
            PhaseTable(phase, (edges[k], edges[k + 1]), self.params)
            for k in range(len(edges) - 1)
        ]

        # The outer parts reach approx_inf; inner boundaries come from chaining
        cuts = [inf0]
        approximants = []
        previous_right = None
        for i, (x_t, bracket) in enumerate(zip(points, brackets)):
            sign = np.sign(slope(x_t))
            if sign == 0.0:
                raise RuntimeError(f"Potential is flat at turning point x = {x_t}")

            if sign > 0:
                left = WkbApproximant.oscillating(phase, x_t, -1, 1.0, tables[i])
                right = WkbApproximant.decaying(phase, x_t, 1, 1.0, tables[i + 1])
            else:
                left = WkbApproximant.decaying(phase, x_t, -1, 1.0, tables[i])
                right = WkbApproximant.oscillating(phase, x_t, 1, 1.0, tables[i + 1])

            if previous_right is not None:
                interval = self._chain_interval(brackets[i - 1], bracket, points[i - 1], x_t)
                cut, amplitude = self._chain(previous_right, left, interval, left.is_oscillating)
                left = left.scaled(amplitude)
                right = right.scaled(amplitude)
                cuts.append(cut)

            approximants.append((AiryApproximant(phase, x_t, bracket).match(left, right), left, right))
            previous_right = right
        cuts.append(inf1)

        parts = [
            ApproxPart(
                airy,
                left,
                right,
                (cuts[i], cuts[i + 1]),
                self.params.airy_transition_fraction,
                enable_joints=self.params.enable_airy_joints,
            )
            for i, (airy, left, right) in enumerate(approximants)
        ]

        airy_ranges = [part.airy.bracket for part in parts]
        wkb_ranges = [part.range() for part in parts]
        return parts, airy_ranges, wkb_ranges

    def calc_psi(self, x):
        """Unscaled value(s) of the assembled approximation."""
        if np.ndim(x) == 0:
            for part in self._parts:
                if part.contains(x):
                    return complex(part.evaluate(x))
            raise ValueError(
                f"x out of range (x = {x}, ranges: {[p.range() for p in self._parts]})"
            )

        x = np.asarray(x, dtype=float)
        remaining = np.ones(x.shape, dtype=bool)
        branches = []
        for part in self._parts:
            mask = remaining & part.contains(x)
            branches.append((mask, part.evaluate))
            remaining &= ~mask
        if np.any(remaining):
            raise ValueError(
                f"x out of range ({int(np.sum(remaining))} points, e.g. "
                f"x = {x[remaining].flat[0]}, ranges: {[p.range() for p in self._parts]})"
            )
        return _piecewise(x, branches)

    def evaluate(self, x):
        return as_output(self._scale * np.asarray(self.calc_psi(x)))

    def __call__(self, x):
        return self.evaluate(x)

    def range(self) -> Tuple[float, float]:
        return (self._parts[0].range()[0], self._parts[-1].range()[1])

    @property
    def energy(self) -> float:
        return self._phase.energy

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def scale(self) -> complex:
        """Factor applied by evaluate() on top of calc_psi()."""
        return self._scale

    @property
    def view(self) -> Tuple[float, float]:
        return self._view

    @view.setter
    def view(self, view: Tuple[float, float]):
        self._view = (float(view[0]), float(view[1]))

    @property
    def parts(self) -> List[WaveFunctionPart]:
        return list(self._parts)

    @property
    def turning_points(self) -> TurningPointGroup:
        return self._turning_points

    @property
    def airy_ranges(self) -> List[Tuple[float, float]]:
        return list(self._airy_ranges)

    @property
    def wkb_ranges(self) -> List[Tuple[float, float]]:
        return list(self._wkb_ranges)

    def sample_view(self, n: Optional[int] = None) -> SampledPoints:
        """Evaluate ψ on n evenly spaced points across the view (clipped to range())."""
        lo, hi = self.range()
        return evaluate_function_between(
            self.evaluate,
            max(self._view[0], lo),
            min(self._view[1], float(np.nextafter(hi, lo))),
            NUMBER_OF_POINTS if n is None else n,
            self.params.trapeze_per_thread,
            self.params.max_workers,
        )

    def wkb_ranges_in_view(self) -> List[Tuple[float, float]]:
        """WKB ranges clipped to the view."""
        lo, hi = self._view
        return [(max(lo, r[0]), min(hi, r[1])) for r in self._wkb_ranges]

    def is_wkb(self, x) -> bool:
        return any(is_in_range(r, x) for r in self._wkb_ranges)

    def is_airy(self, x) -> bool:
        return any(is_in_range(r, x) for r in self._airy_ranges)

    def __repr__(self) -> str:
        return (
            f"WaveFunction(energy={self.energy:.9f}, "
            f"turning_points={len(self._turning_points)}, parts={len(self._parts)}, "
            f"view=({self._view[0]:.4f}, {self._view[1]:.4f}))"
        )


class Superposition:
    """
    Weighted sum of bound states of one potential.

    Members are built in parallel, each scaled by its coefficient
    (Scaling.mul); the sum then gets its own scaling.

    Args:
        potential: Vectorised potential U(x).
        mass: Particle mass.
        components: (n_energy, coefficient) pairs.
        approx_inf: Outer bounds standing in for ±infinity.
        view_factor: Relative widening of each member's view.
        scaling: Scaling of the sum (default: renormalise to 1).
        params: Solver parameters.
        verbose: Print progress.
    """

    def __init__(
        self,
        potential: Callable,
        mass: float,
        components: Sequence[Tuple[int, complex]],
        approx_inf: Optional[Tuple[float, float]] = None,
        view_factor: Optional[float] = None,
        scaling: Optional[Scaling] = None,
        params: Optional[WKBParameters] = None,
        verbose: bool = False
    ):
        if not components:
            raise ValueError("Superposition needs at least one component")
        self.params = params or WKBParameters()
        self.approx_inf = (
            tuple(float(v) for v in approx_inf) if approx_inf is not None
            else self.params.approx_inf
        )
        scaling = scaling or Scaling.renormalize()

        def build(component):
            n, coefficient = component
            wave = WaveFunction(
                potential,
                mass,
                n_energy=n,
                approx_inf=self.approx_inf,
                view_factor=view_factor,
                scaling=Scaling.mul(coefficient),
                params=self.params,
                verbose=verbose,
            )
            if verbose:
                print(f"Calculated {ordinal(n)} Energy\n")
            return wave

        self.wave_funcs: List[WaveFunction] = parallel_map(
            build, list(components), self.params.max_workers
        )

        self.scaling = scaling
        if scaling.kind is ScalingType.MUL:
            self._scale = complex(scaling.factor)
        elif scaling.kind is ScalingType.NONE:
            self._scale = 1.0 + 0j
        else:
            self._scale = renormalize_factor(
                self._sum, self.approx_inf, self.params, scale=scaling.factor
            )
            if verbose:
                print(f"factor: {self._scale}")

    def _sum(self, x):
        total = self.wave_funcs[0].evaluate(x)
        for wave in self.wave_funcs[1:]:
            total = total + wave.evaluate(x)
        return total

    def evaluate(self, x):
        return as_output(self._scale * np.asarray(self._sum(x)))

    def __call__(self, x):
        return self.evaluate(x)

    def range(self) -> Tuple[float, float]:
        lo = max(w.range()[0] for w in self.wave_funcs)
        hi = min(w.range()[1] for w in self.wave_funcs)
        return (lo, hi)

    @property
    def energies(self) -> List[float]:
        return [w.energy for w in self.wave_funcs]

    @property
    def scale(self) -> complex:
        return self._scale

    @property
    def view(self) -> Tuple[float, float]:
        """Union of the member views."""
        return (
            min(w.view[0] for w in self.wave_funcs),
            max(w.view[1] for w in self.wave_funcs),
        )

    def __repr__(self) -> str:
        return f"Superposition(members={len(self.wave_funcs)}, energies={self.energies})"
