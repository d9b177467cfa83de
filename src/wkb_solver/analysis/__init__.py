"""
Analysis module for WKB Solver.

Diagnostic tables for turning points and assembled wavefunctions.
"""

from wkb_solver.analysis.summary import (
    turning_point_table,
    parts_table,
    print_wave_function_summary,
)

__all__ = [
    "turning_point_table",
    "parts_table",
    "print_wave_function_summary",
]
