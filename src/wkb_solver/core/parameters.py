"""
WKB Parameters dataclass for configuring the solver.

The parameters control integration resolution, turning-point detection
and the geometry of the WKB/Airy transition bands. Defaults come from
constants.json via wkb_solver.core.constants.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from wkb_solver.core.constants import (
    H_BAR,
    INTEG_STEPS,
    TRAPEZE_PER_THREAD,
    AIRY_TRANSITION_FRACTION,
    ENABLE_AIRY_JOINTS,
    APPROX_INF,
    VIEW_FACTOR,
    MAX_TURNING_POINTS,
    ACCURACY,
    GUESS_POINTS,
    MAX_NEWTON_ITERS,
    BOUNDARY_SCAN_LIMIT,
    MAX_WORKERS,
)


@dataclass
class WKBParameters:
    """
    Parameters for the WKB/Airy wavefunction solver.

    Attributes:
        hbar: Reduced Planck constant (natural units, default 1).
        integ_steps: Samples per phase integral and for renormalization.
        trapeze_per_thread: Trapezoid panels per parallel chunk.
        airy_transition_fraction: Joint width as a fraction of the
            turning-point bracket width. Must lie in (0, 1].
        enable_airy_joints: Blend WKB and Airy segments through joints.
            When disabled the segments switch abruptly at the bracket edges.
        approx_inf: Outer bounds standing in for (-inf, inf).
        view_factor: Margin added around the classical region when the
            view is detected automatically.
        max_turning_points: Maximum deflation rounds per detection pass.
        accuracy: Newton precision for validity-function zeros.
        guess_points: Grid size used by make_guess.
        max_newton_iters: Iteration cap for bounded Newton searches.
        boundary_scan_limit: Maximum bracketing steps when a boundary zero
            has to be synthesised outside the view.
        max_workers: Thread pool size (None lets the executor decide).
    """

    hbar: float = H_BAR
    integ_steps: int = INTEG_STEPS
    trapeze_per_thread: int = TRAPEZE_PER_THREAD
    airy_transition_fraction: float = AIRY_TRANSITION_FRACTION
    enable_airy_joints: bool = ENABLE_AIRY_JOINTS
    approx_inf: Tuple[float, float] = field(default_factory=lambda: tuple(APPROX_INF))
    view_factor: float = VIEW_FACTOR
    max_turning_points: int = MAX_TURNING_POINTS
    accuracy: float = ACCURACY
    guess_points: int = GUESS_POINTS
    max_newton_iters: int = MAX_NEWTON_ITERS
    boundary_scan_limit: int = BOUNDARY_SCAN_LIMIT
    max_workers: Optional[int] = MAX_WORKERS

    def __post_init__(self):
        """Normalize and validate after initialization."""
        self.approx_inf = (float(self.approx_inf[0]), float(self.approx_inf[1]))
        self._validate()

    def _validate(self):
        """Validate parameter values."""
        if self.hbar <= 0:
            raise ValueError(f"hbar must be positive, got {self.hbar}")
        if self.integ_steps < 2:
            raise ValueError(f"integ_steps must be at least 2, got {self.integ_steps}")
        if self.trapeze_per_thread < 1:
            raise ValueError(
                f"trapeze_per_thread must be positive, got {self.trapeze_per_thread}"
            )
        if not 0 < self.airy_transition_fraction <= 1:
            raise ValueError(
                f"airy_transition_fraction must lie in (0, 1], got {self.airy_transition_fraction}"
            )
        if self.approx_inf[0] >= self.approx_inf[1]:
            raise ValueError(f"approx_inf must be increasing, got {self.approx_inf}")
        if self.view_factor < 0:
            raise ValueError(f"view_factor must be non-negative, got {self.view_factor}")
        if self.max_turning_points < 1:
            raise ValueError(
                f"max_turning_points must be positive, got {self.max_turning_points}"
            )
        if self.accuracy <= 0:
            raise ValueError(f"accuracy must be positive, got {self.accuracy}")
        if self.guess_points < 1:
            raise ValueError(f"guess_points must be positive, got {self.guess_points}")
        if self.max_newton_iters < 1:
            raise ValueError(
                f"max_newton_iters must be positive, got {self.max_newton_iters}"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    def __repr__(self) -> str:
        return (
            f"WKBParameters(\n"
            f"  hbar = {self.hbar:.4g},\n"
            f"  integ_steps = {self.integ_steps},\n"
            f"  trapeze_per_thread = {self.trapeze_per_thread},\n"
            f"  airy_transition_fraction = {self.airy_transition_fraction:.3f},\n"
            f"  approx_inf = ({self.approx_inf[0]:.3f}, {self.approx_inf[1]:.3f}),\n"
            f"  view_factor = {self.view_factor:.3f},\n"
            f"  accuracy = {self.accuracy:.1e}\n"
            f")"
        )
