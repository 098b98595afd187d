from __future__ import annotations

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.sph.kernels import pressure_kernel_weight


def pressure_state_equation_linear(rho: np.ndarray, rho0: float, k: float) -> np.ndarray:
    """
    Linear state equation:
        p_i = k (rho_i - rho0)

    Not clamped: particles below rest density get negative pressure, which
    turns the pairwise term below into an attraction toward denser regions.
    """
    rho0 = float(rho0)
    k = float(k)
    return k * (rho - rho0)


def pressure_force_pairwise(
    state: ParticleState,
    neighbor_search,
    h: float,
) -> np.ndarray:
    """
    Pairwise pressure force, read from the current state.p:

        F_i = sum_{j != i, 0 < r_ij < h} d_ij * (h - r_ij) * (p_i + p_j) / 2
        d_ij = (x_j - x_i) / r_ij

    Every ordered pair is visited from both sides; there is no
    action-reaction shortcut, each particle only accumulates its own sum.
    Exactly coincident pairs (r = 0) have no direction and are skipped.
    """
    n = state.n
    h = float(h)

    f = np.zeros((n, 2), dtype=np.float64)

    for i in range(n):
        nbs = neighbor_search.query(i, state.pos)
        if not nbs:
            continue

        idx = np.asarray(nbs, dtype=np.int64)
        d = state.pos[idx] - state.pos[i][None, :]
        r = np.linalg.norm(d, axis=1)

        keep = (r > 0.0) & (r < h)
        if not np.any(keep):
            continue

        idx, d, r = idx[keep], d[keep], r[keep]
        direction = d / r[:, None]
        weight = pressure_kernel_weight(r, h)
        magnitude = weight * (state.p[i] + state.p[idx]) / 2.0

        f[i] = np.sum(direction * magnitude[:, None], axis=0)

    return f


def accumulate_pressure_forces(
    state: ParticleState,
    neighbor_search,
    h: float,
    rho0: float,
    k: float,
    gravity: np.ndarray,
) -> None:
    """
    Pressure/force pass of one step, run after the density pass.

    Overwrites state.p from state.rho, adds the pairwise pressure force on top
    of whatever state.force already holds (the gravity seed), then adds the
    gravity vector once more.
    """
    state.p[:] = pressure_state_equation_linear(state.rho, rho0=rho0, k=k)

    state.force += pressure_force_pairwise(state=state, neighbor_search=neighbor_search, h=h)

    state.force += np.asarray(gravity, dtype=np.float64)[None, :]
