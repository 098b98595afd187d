"""
Observability export: CSV snapshots for particle data.

What this module does:
- Writes one CSV file containing per-particle attributes for offline analysis.

Constraints:
- Pure I/O: it must not modify simulation state.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from sphfluid.core.state import ParticleState


def export_particles_csv(path: str | Path, state: ParticleState) -> None:
    """
    Export a snapshot of all particles to CSV.

    Columns:
      id, x, y, vx, vy, fx, fy, rho, p
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    n = state.n
    ids = np.arange(n, dtype=np.int64)

    header = "id,x,y,vx,vy,fx,fy,rho,p\n"
    table = np.column_stack(
        [
            ids,
            state.pos[:, 0],
            state.pos[:, 1],
            state.vel[:, 0],
            state.vel[:, 1],
            state.force[:, 0],
            state.force[:, 1],
            state.rho,
            state.p,
        ]
    )
    fmt = "%d,%.17g,%.17g,%.17g,%.17g,%.17g,%.17g,%.17g,%.17g"

    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(header)
        np.savetxt(f, table, delimiter=",", fmt=fmt)
