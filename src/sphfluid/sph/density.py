from __future__ import annotations

import numpy as np

from sphfluid.core.state import ParticleState
from sphfluid.sph.kernels import density_kernel_W


def compute_density_summation(
    state: ParticleState,
    neighbor_search,
    h: float,
) -> np.ndarray:
    """
    Density by kernel summation over all particles within the smoothing radius:

        rho_i = sum_j W(||x_i - x_j||, h),   W(r, h) = (h - r)^2 for r < h

    Notes:
    - The sum includes j = i, so every particle gets at least its own h^2.
    - Coincident neighbors (r = 0) contribute h^2 each, same as the self term.
    - Each particle only reads positions; results are returned, not written,
      so the caller decides when the whole pass becomes visible.
    """
    n = state.n
    h = float(h)
    rho = np.zeros((n,), dtype=np.float64)

    W0 = density_kernel_W(0.0, h)

    for i in range(n):
        # self contribution (j = i)
        rho_i = W0

        nbs = neighbor_search.query(i, state.pos)
        if nbs:
            r = np.linalg.norm(state.pos[nbs] - state.pos[i][None, :], axis=1)
            rho_i += float(np.sum(density_kernel_W(r, h)))

        rho[i] = rho_i

    return rho
