"""
Tabulated diagnostics for turning points and assembled wavefunctions.
"""

from typing import List

from tabulate import tabulate

from wkb_solver.core.turning_points import TurningPointGroup
from wkb_solver.wavefunction.builder import ApproxPart, PureWkb, WaveFunction


def turning_point_table(group: TurningPointGroup, tablefmt: str = 'grid') -> str:
    """One row per turning point with its Airy bracket."""
    table_data = []
    for i, ((t1, t2), x_t) in enumerate(group):
        table_data.append([
            i,
            f"{t1:.6f}",
            f"{x_t:.6f}",
            f"{t2:.6f}",
            f"{t2 - t1:.6f}",
        ])

    headers = ['#', 't1', 'Turning point', 't2', 'Bracket width']
    return tabulate(table_data, headers=headers, tablefmt=tablefmt)


def _part_rows(wave_function: WaveFunction) -> List[list]:
    rows = []
    for i, part in enumerate(wave_function.parts):
        lo, hi = part.range()
        if isinstance(part, ApproxPart):
            t1, t2 = part.airy.bracket
            rows.append([
                i,
                "WKB + Airy",
                f"[{lo:.6f}, {hi:.6f})",
                f"{part.turning_point:.6f}",
                f"[{t1:.6f}, {t2:.6f})",
                "Yes" if part.enable_joints else "No",
            ])
        elif isinstance(part, PureWkb):
            rows.append([i, "WKB", f"[{lo:.6f}, {hi:.6f})", "-", "-", "No"])
        else:
            rows.append([i, type(part).__name__, f"[{lo:.6f}, {hi:.6f})", "-", "-", "-"])
    return rows


def parts_table(wave_function: WaveFunction, tablefmt: str = 'grid') -> str:
    """One row per assembled part."""
    headers = ['#', 'Kind', 'Range', 'Turning point', 'Airy range', 'Joints']
    return tabulate(_part_rows(wave_function), headers=headers, tablefmt=tablefmt)


def print_wave_function_summary(wave_function: WaveFunction):
    """Print energy, view and the part and turning-point tables."""
    print("\n" + "=" * 80)
    print("WAVEFUNCTION SUMMARY")
    print("=" * 80)
    print(f"  Energy: {wave_function.energy:.9f}")
    print(f"  Mass:   {wave_function.phase.mass}")
    print(f"  View:   ({wave_function.view[0]:.6f}, {wave_function.view[1]:.6f})")
    print(f"  Range:  ({wave_function.range()[0]:.6f}, {wave_function.range()[1]:.6f})")
    print(f"  Scale:  {wave_function.scale:.6g}")

    print("\n" + "-" * 80)
    print("TURNING POINTS")
    print("-" * 80)
    if wave_function.turning_points:
        print(turning_point_table(wave_function.turning_points))
    else:
        print("  (none in view)")

    print("\n" + "-" * 80)
    print("PARTS")
    print("-" * 80)
    print(parts_table(wave_function))
