"""
Observability export: VTK legacy ASCII PolyData for particle visualization.

What this module does:
- Writes a VTK legacy (ASCII) PolyData file containing:
  - POINTS (particle positions, padded with z=0)
  - VERTICES (one vertex per particle)
  - POINT_DATA scalars/vectors for analysis in ParaView

Constraints:
- Pure I/O: it must not modify simulation state.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from sphfluid.core.state import ParticleState


def export_particles_vtk_legacy(path: str | Path, state: ParticleState) -> None:
    """
    Export particles as VTK legacy ASCII PolyData.

    POINT_DATA fields: rho, p (scalars), v and f (vectors, z=0).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n = state.n

    # Pad to 3D for VTK vectors
    pos3 = np.zeros((n, 3), dtype=np.float64)
    vel3 = np.zeros((n, 3), dtype=np.float64)
    force3 = np.zeros((n, 3), dtype=np.float64)
    pos3[:, 0:2] = state.pos
    vel3[:, 0:2] = state.vel
    force3[:, 0:2] = state.force

    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write("# vtk DataFile Version 3.0\n")
        f.write("SPH fluid particles (2D) - legacy PolyData\n")
        f.write("ASCII\n")
        f.write("DATASET POLYDATA\n")

        f.write(f"POINTS {n} float\n")
        for x, y, z in pos3:
            f.write(f"{x:.17g} {y:.17g} {z:.17g}\n")

        # VERTICES (n cells, 2*n indices)
        f.write(f"VERTICES {n} {2*n}\n")
        for i in range(n):
            f.write(f"1 {i}\n")

        f.write(f"POINT_DATA {n}\n")

        for name, values in (("rho", state.rho), ("p", state.p)):
            f.write(f"SCALARS {name} float 1\n")
            f.write("LOOKUP_TABLE default\n")
            for value in values:
                f.write(f"{float(value):.17g}\n")

        for name, vectors in (("v", vel3), ("f", force3)):
            f.write(f"VECTORS {name} float\n")
            for vx, vy, vz in vectors:
                f.write(f"{vx:.17g} {vy:.17g} {vz:.17g}\n")
