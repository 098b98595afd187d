"""
Observability: per-step diagnostics ("vital signs") for a fluid run.

What this module does:
- Defines a structured `StepDiagnostics` snapshot for one simulation step.
- Computes statistics for speed, density, pressure, neighbor counts and how
  many particles currently rest on a wall of the bounds box.

Constraints:
- Strictly read-only: it must not modify the particle state.
- It implements no physics; it only reports quantities the step produced.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sphfluid.core.config import Bounds
from sphfluid.core.state import ParticleState


@dataclass(frozen=True)
class StepDiagnostics:
    """Structured diagnostics for one simulation step."""

    step: int
    dt: float
    n_particles: int

    v_max: float

    rho_min: float
    rho_mean: float
    rho_max: float

    p_min: float
    p_mean: float
    p_max: float

    neigh_min: int
    neigh_mean: float
    neigh_max: int

    n_on_wall: int

    def format_line(self) -> str:
        return (
            f"[STEP {self.step:04d}] dt={self.dt:.3e} "
            f"|v|max={self.v_max:.3e} "
            f"rho(min/avg/max)={self.rho_min:.2f}/{self.rho_mean:.2f}/{self.rho_max:.2f} "
            f"p(min/avg/max)={self.p_min:.2f}/{self.p_mean:.2f}/{self.p_max:.2f} "
            f"neigh(min/avg/max)={self.neigh_min}/{self.neigh_mean:.1f}/{self.neigh_max} "
            f"on_wall={self.n_on_wall}"
        )


def compute_step_diagnostics(
    step: int,
    dt: float,
    state: ParticleState,
    neighbor_search,
    bounds: Bounds | None = None,
) -> StepDiagnostics:
    """
    Compute diagnostics for a given step without mutating the simulation state.

    Args:
        step: 1-based step index for logging.
        dt: effective time step used in this step.
        state: particle state after the step.
        neighbor_search: neighbor search built on current positions.
        bounds: when given, particles lying exactly on a wall are counted.
    """
    n = state.n
    vnorm = np.linalg.norm(state.vel, axis=1)

    neigh_counts = np.empty((n,), dtype=np.int64)
    for i in range(n):
        neigh_counts[i] = len(neighbor_search.query(i, state.pos))

    n_on_wall = 0
    if bounds is not None:
        on_wall = np.any((state.pos == bounds.min[None, :]) | (state.pos == bounds.max[None, :]), axis=1)
        n_on_wall = int(np.count_nonzero(on_wall))

    return StepDiagnostics(
        step=int(step),
        dt=float(dt),
        n_particles=n,
        v_max=float(np.max(vnorm)),
        rho_min=float(np.min(state.rho)),
        rho_mean=float(np.mean(state.rho)),
        rho_max=float(np.max(state.rho)),
        p_min=float(np.min(state.p)),
        p_mean=float(np.mean(state.p)),
        p_max=float(np.max(state.p)),
        neigh_min=int(np.min(neigh_counts)),
        neigh_mean=float(np.mean(neigh_counts)),
        neigh_max=int(np.max(neigh_counts)),
        n_on_wall=n_on_wall,
    )
