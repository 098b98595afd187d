from __future__ import annotations

from typing import List

import numpy as np

from sphfluid.neighbors.spatial_hash import SpatialHash


class BruteForceNeighbors:
    """
    O(n^2) neighbor search: every particle is tested against every other.

    Same interface as SpatialHash. query() returns the indices j != i with
    ||x_j - x_i|| < h in ascending order; exactly coincident particles are
    included.
    """

    def __init__(self, support_radius: float):
        self.h = float(support_radius)

    def build(self, positions: np.ndarray) -> None:
        # nothing to precompute
        return None

    def query(self, i: int, positions: np.ndarray) -> List[int]:
        r = np.linalg.norm(positions - positions[i][None, :], axis=1)
        mask = r < self.h
        mask[i] = False
        return np.flatnonzero(mask).tolist()


def make_neighbor_search(kind: str, support_radius: float):
    """Factory for the configured neighbor search ("brute_force" or "spatial_hash")."""
    kind = str(kind).lower()
    if kind == "brute_force":
        return BruteForceNeighbors(support_radius=support_radius)
    if kind == "spatial_hash":
        return SpatialHash(support_radius=support_radius)
    raise ValueError(f"Unknown neighbor search type: {kind!r}")
