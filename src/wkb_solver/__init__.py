"""
WKB Solver - semiclassical bound states of the 1-D Schrödinger equation

Approximates bound-state wavefunctions of

    -ħ²/(2m) ψ'' + U(x) ψ = E ψ

with the WKB method, patched with Airy functions around every classical
turning point and blended by smooth joints.

Main Interface:
    from wkb_solver import WaveFunction, HarmonicPotential

    wave = WaveFunction(HarmonicPotential(), mass=1.0, n_energy=3)
    print(f"Energy: {wave.energy}")
    psi = wave(np.linspace(-5.0, 5.0, 1001))

Components:
- WaveFunction: piecewise WKB/Airy assembly with renormalisation
- Superposition: weighted sum of several bound states
- calc_turning_points: validity-function based turning point detection
- nth_energy: Bohr-Sommerfeld energy levels
- numerics: integration, derivative and root finding building blocks
"""

from wkb_solver.core import (
    H_BAR,
    WKBParameters,
    Phase,
    TurningPointGroup,
    calc_turning_points,
    nth_energy,
)

from wkb_solver.wavefunction import (
    AiryApproximant,
    WkbApproximant,
    Joint,
    Scaling,
    ScalingType,
    WaveFunction,
    Superposition,
    renormalize,
    renormalize_factor,
)

from wkb_solver.potentials import (
    HarmonicPotential,
    DoubleWellPotential,
    LinearPotential,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "H_BAR",
    "WKBParameters",
    "Phase",
    # Turning points and energies
    "TurningPointGroup",
    "calc_turning_points",
    "nth_energy",
    # Wavefunctions
    "AiryApproximant",
    "WkbApproximant",
    "Joint",
    "Scaling",
    "ScalingType",
    "WaveFunction",
    "Superposition",
    "renormalize",
    "renormalize_factor",
    # Potentials
    "HarmonicPotential",
    "DoubleWellPotential",
    "LinearPotential",
]
