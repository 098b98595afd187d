from __future__ import annotations

import numpy as np


def density_kernel_W(r, h: float):
    """
    Density smoothing weight with compact support:

        W(r, h) = (h - r)^2   for r < h
                  0           otherwise

    Maximum weight h^2 at r = 0. `r` may be a scalar or an array of distances.
    """
    h = float(h)
    r = np.asarray(r, dtype=np.float64)
    w = np.where(r < h, (h - r) ** 2, 0.0)
    return float(w) if w.ndim == 0 else w


def pressure_kernel_weight(r, h: float):
    """
    Linear falloff used by the pairwise pressure force:

        w(r, h) = h - r   for r < h
                  0       otherwise
    """
    h = float(h)
    r = np.asarray(r, dtype=np.float64)
    w = np.where(r < h, h - r, 0.0)
    return float(w) if w.ndim == 0 else w
