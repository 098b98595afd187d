from __future__ import annotations

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Particle:
    """Read-only copy of one particle's fields at the moment it was taken."""

    index: int
    position: np.ndarray  # (2,)
    velocity: np.ndarray  # (2,)
    force: np.ndarray     # (2,)
    density: float
    pressure: float


@dataclass(slots=True)
class ParticleState:
    """
    Struct-of-arrays storage for all fluid particles of one simulation.

    Field ownership within a step:
    - force is overwritten with the gravity seed, then accumulated by the
      pressure force pass and consumed by the integrator
    - rho and p are derived quantities, recomputed from scratch every step
    - pos and vel are only written by the integrator

    The particle count never changes after construction.
    """

    pos: np.ndarray    # (N, 2)
    vel: np.ndarray    # (N, 2)
    force: np.ndarray  # (N, 2)

    rho: np.ndarray    # (N,)
    p: np.ndarray      # (N,)

    @property
    def n(self) -> int:
        return int(self.pos.shape[0])

    def particle(self, i: int) -> Particle:
        return Particle(
            index=int(i),
            position=self.pos[i].copy(),
            velocity=self.vel[i].copy(),
            force=self.force[i].copy(),
            density=float(self.rho[i]),
            pressure=float(self.p[i]),
        )

    def positions_snapshot(self) -> np.ndarray:
        """Copy of positions in particle-index order, marked read-only."""
        snap = self.pos.copy()
        snap.flags.writeable = False
        return snap

    def validate(self) -> None:
        n = self.n
        if self.pos.shape != (n, 2):
            raise ValueError(f"pos shape {self.pos.shape} != (N, 2) = ({n},2)")

        for name, arr, shape in [
            ("vel", self.vel, (n, 2)),
            ("force", self.force, (n, 2)),
            ("rho", self.rho, (n,)),
            ("p", self.p, (n,)),
        ]:
            if arr.shape != shape:
                raise ValueError(f"{name} shape {arr.shape} != {shape}")

        if not np.isfinite(self.pos).all():
            raise ValueError("pos contains NaN/Inf")
        if not np.isfinite(self.vel).all():
            raise ValueError("vel contains NaN/Inf")
