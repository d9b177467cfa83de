"""
WKB Solver Test Suite.

Unit and integration tests for the semiclassical wavefunction solver:
- Numerics: integration, derivatives, root finding with deflation
- Turning points: validity zeros, bracket pairing
- Wavefunctions: WKB/Airy approximants, joints, assembly, scaling

Test Files:
- test_integrate.py: Chunked trapezoid integration and sampling
- test_roots.py: Newton, regula falsi, DeflatingZeroFinder
- test_turning_points.py: Turning-point detection
- test_approximants.py: WKB, Airy and Joint
- test_wavefunction.py: Integration tests for WaveFunction and Superposition

Usage:
    # Run all tests
    pytest tests/ -v

    # Run only unit tests (fast)
    pytest tests/ -m unit -v

    # Skip slow tests
    pytest tests/ -m "not slow" -v
"""
