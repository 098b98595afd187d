from __future__ import annotations

import numpy as np
from collections import defaultdict
from typing import Dict, List, Tuple


class SpatialHash:
    """
    Uniform grid spatial hash for neighbor search.
    Deterministic cell iteration.

    Cell size equals the smoothing radius, so the 3x3 block of cells around a
    particle holds every candidate with r < h. Returns the same neighbor set
    as BruteForceNeighbors.
    """

    def __init__(self, support_radius: float):
        self.h = float(support_radius)
        self.cell_size = self.h
        self.grid: Dict[Tuple[int, ...], List[int]] = defaultdict(list)

    def _cell_index(self, position: np.ndarray) -> Tuple[int, ...]:
        return tuple(np.floor(position / self.cell_size).astype(int))

    def build(self, positions: np.ndarray) -> None:
        self.grid.clear()

        for i, pos in enumerate(positions):
            cell = self._cell_index(pos)
            self.grid[cell].append(i)

    def query(self, i: int, positions: np.ndarray) -> List[int]:
        pos = positions[i]
        base_cell = self._cell_index(pos)

        candidates: List[int] = []

        # iterate over neighboring cells (3x3 region)
        offsets = [-1, 0, 1]
        for dx in offsets:
            for dy in offsets:
                cell = (base_cell[0] + dx, base_cell[1] + dy)
                for j in self.grid.get(cell, []):
                    if j != i:
                        candidates.append(j)

        if not candidates:
            return []

        # keep index order stable regardless of cell layout
        candidates.sort()
        idx = np.asarray(candidates, dtype=np.int64)
        r = np.linalg.norm(positions[idx] - pos[None, :], axis=1)
        return idx[r < self.h].tolist()
