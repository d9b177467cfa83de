"""
Wavefunction module for WKB Solver.

WKB and Airy approximants, the joints blending them, and the assembled
piecewise wavefunction.
"""

from wkb_solver.wavefunction.joint import WaveFunctionPart, Joint, is_in_range
from wkb_solver.wavefunction.wkb import PhaseTable, WkbApproximant
from wkb_solver.wavefunction.airy import AiryApproximant, airy_ai, airy_bi
from wkb_solver.wavefunction.builder import (
    ScalingType,
    Scaling,
    PureWkb,
    ApproxPart,
    WaveFunction,
    Superposition,
    renormalize_factor,
    renormalize,
)

__all__ = [
    "WaveFunctionPart",
    "Joint",
    "is_in_range",
    "PhaseTable",
    "WkbApproximant",
    "AiryApproximant",
    "airy_ai",
    "airy_bi",
    "ScalingType",
    "Scaling",
    "PureWkb",
    "ApproxPart",
    "WaveFunction",
    "Superposition",
    "renormalize_factor",
    "renormalize",
]
