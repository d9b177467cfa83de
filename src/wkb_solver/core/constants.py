"""
Numerical and physical constants for WKB Solver.

All quantities are in natural units (ħ = 1 by default, energies and
lengths in the units of the supplied potential).

Tunable defaults (integration resolution, root-finding accuracy, transition
band width, ...) are loaded from constants.json if available, otherwise
the built-in values below are used.
"""

import json
import numpy as np
from pathlib import Path
from typing import Dict, Any

# =============================================================================
# Load Constants from JSON
# =============================================================================

# Path to constants.json (same directory as this file)
_CONSTANTS_JSON_PATH = Path(__file__).parent / "constants.json"

# Default values (used if constants.json is missing or incomplete)
_DEFAULT_CONSTANTS: Dict[str, Any] = {
    "hbar": 1.0,  # reduced Planck constant (natural units)
    "integ_steps": 64000,  # samples per phase integral / renormalization
    "trapeze_per_thread": 1000,  # trapezoid panels per parallel chunk
    "number_of_points": 100000,  # samples for consumers that tabulate psi
    "airy_transition_fraction": 0.5,  # joint width / turning-point bracket width
    "enable_airy_joints": True,
    "approx_inf": [-200.0, 200.0],  # numerical stand-in for (-inf, inf)
    "view_factor": 0.5,  # view margin as a fraction of the classical region
    "max_turning_points": 256,  # deflation rounds per detection pass
    "accuracy": 1e-9,  # Newton precision for validity-function zeros
    "guess_points": 1000,  # grid size for make_guess
    "max_newton_iters": 10000,  # iteration cap for bounded Newton
    "boundary_scan_limit": 10000000,  # max steps when synthesising a boundary zero
    "max_workers": None,  # thread pool size (None: executor default)
}


def load_constants_from_json() -> Dict[str, Any]:
    """
    Load solver constants from constants.json.

    If the file doesn't exist or is invalid, returns default values.

    Returns:
        Dictionary with constant names as keys and values.
    """
    if _CONSTANTS_JSON_PATH.exists():
        try:
            with open(_CONSTANTS_JSON_PATH, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
                # Merge with defaults to ensure all keys exist
                result = _DEFAULT_CONSTANTS.copy()
                result.update(loaded)
                return result
        except (json.JSONDecodeError, IOError) as e:
            print(f"Warning: Failed to load constants.json: {e}. Using defaults.")
            return _DEFAULT_CONSTANTS.copy()
    else:
        return _DEFAULT_CONSTANTS.copy()


def get_constants_json_path() -> Path:
    """Return the path to the constants.json file."""
    return _CONSTANTS_JSON_PATH


# Load constants at module import time
_LOADED_CONSTANTS = load_constants_from_json()

# =============================================================================
# Physical Constants
# =============================================================================

# Reduced Planck constant
H_BAR: float = float(_LOADED_CONSTANTS["hbar"])

# Machine epsilon and its square root (derivative step, boundary nudges)
EPSILON: float = float(np.finfo(float).eps)
SQRT_EPSILON: float = float(np.sqrt(EPSILON))

# =============================================================================
# Integration
# =============================================================================

# Number of samples for every phase integral and for renormalization
INTEG_STEPS: int = int(_LOADED_CONSTANTS["integ_steps"])

# Trapezoid panels handled by one worker
TRAPEZE_PER_THREAD: int = int(_LOADED_CONSTANTS["trapeze_per_thread"])

# Samples used when a consumer tabulates the assembled wavefunction
NUMBER_OF_POINTS: int = int(_LOADED_CONSTANTS["number_of_points"])

# =============================================================================
# Assembly
# =============================================================================

# Width of each WKB <-> Airy joint relative to its turning-point bracket
AIRY_TRANSITION_FRACTION: float = float(_LOADED_CONSTANTS["airy_transition_fraction"])
ENABLE_AIRY_JOINTS: bool = bool(_LOADED_CONSTANTS["enable_airy_joints"])

# Outer integration bounds standing in for +-infinity
APPROX_INF: tuple = tuple(float(v) for v in _LOADED_CONSTANTS["approx_inf"])

# Margin added on both sides of the classical region to form the view
VIEW_FACTOR: float = float(_LOADED_CONSTANTS["view_factor"])

# =============================================================================
# Turning-Point Detection
# =============================================================================

MAX_TURNING_POINTS: int = int(_LOADED_CONSTANTS["max_turning_points"])
ACCURACY: float = float(_LOADED_CONSTANTS["accuracy"])
GUESS_POINTS: int = int(_LOADED_CONSTANTS["guess_points"])
MAX_NEWTON_ITERS: int = int(_LOADED_CONSTANTS["max_newton_iters"])
BOUNDARY_SCAN_LIMIT: int = int(_LOADED_CONSTANTS["boundary_scan_limit"])

# =============================================================================
# Parallelism
# =============================================================================

MAX_WORKERS = _LOADED_CONSTANTS["max_workers"]
