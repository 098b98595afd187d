from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable

import numpy as np

from sphfluid.core.config import Bounds, SimulationConfig
from sphfluid.core.errors import LifecycleError, SimulationNotInitializedError
from sphfluid.core.state import Particle, ParticleState
from sphfluid.core.state_builder import build_state
from sphfluid.neighbors.brute_force import make_neighbor_search
from sphfluid.sph.density import compute_density_summation
from sphfluid.sph.pressure import accumulate_pressure_forces

logger = logging.getLogger(__name__)

PositionSink = Callable[[np.ndarray], None]


class Lifecycle(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"


def integrate_symplectic_euler(state: ParticleState, dt: float) -> None:
    """
    Semi-implicit (symplectic) Euler:

        v(t+dt) = v(t) + dt * F
        x(t+dt) = x(t) + dt * v(t+dt)

    Force is used as acceleration (unit mass). dt <= 0 is not rejected.
    """
    dt = float(dt)
    state.vel += state.force * dt
    state.pos += state.vel * dt


def clamp_to_bounds(state: ParticleState, bounds: Bounds) -> None:
    """
    Hard positional clamp into the bounds box.

    Velocity is left alone: a particle pushed into a wall keeps its velocity
    component into the wall and gets re-clamped every step until the force
    turns it around.
    """
    np.clip(state.pos, bounds.min[None, :], bounds.max[None, :], out=state.pos)


class FluidSimulation:
    """
    Owns the particle collection and runs one SPH step at a time.

    Step order:
      1) seed force = (0, g) on every particle
      2) density summation over all particles
      3) pressure from the state equation, pairwise pressure force on top of
         the seed, then (0, g) again
      4) symplectic Euler and positional clamp
      5) hand the position snapshot to every sink

    Each stage finishes for all particles before the next one starts.
    """

    def __init__(
        self,
        config: SimulationConfig,
        positions=None,
        velocities=None,
        sinks: Iterable[PositionSink] = (),
    ):
        # reject bad tunables before any spawner or renderer gets involved
        config.validate()

        self.config = config
        self._state: ParticleState | None = None
        self._sinks: list[PositionSink] = list(sinks)
        self._neighbor_search = make_neighbor_search(config.neighbor_search, config.smoothing_radius)
        self.step_count = 0

        if positions is not None:
            self.place(positions, velocities=velocities)

    @property
    def lifecycle(self) -> Lifecycle:
        return Lifecycle.UNINITIALIZED if self._state is None else Lifecycle.RUNNING

    @property
    def state(self) -> ParticleState:
        if self._state is None:
            raise SimulationNotInitializedError("no particles placed yet")
        return self._state

    @property
    def n(self) -> int:
        return self.state.n

    @property
    def positions(self) -> np.ndarray:
        """Read-only (N, 2) copy of current positions in particle-index order."""
        return self.state.positions_snapshot()

    def particle(self, i: int) -> Particle:
        return self.state.particle(i)

    def place(self, positions, velocities=None) -> None:
        """Supply the initial placement; moves the simulation to RUNNING."""
        if self._state is not None:
            raise LifecycleError("particles already placed; the particle set is fixed")

        self._state = build_state(
            positions,
            velocities=velocities,
            expected_count=self.config.particle_count,
        )
        logger.info(
            "placed %d particles, h=%g k=%g rho0=%g g=%g, neighbors=%s",
            self._state.n,
            self.config.smoothing_radius,
            self.config.pressure_multiplier,
            self.config.rest_density,
            self.config.gravity,
            self.config.neighbor_search,
        )

    def add_sink(self, sink: PositionSink) -> None:
        self._sinks.append(sink)

    def step(self, dt: float | None = None) -> float:
        """
        Advance by one step and return the effective dt (dt * time_scale).

        dt defaults to config.dt_fixed.
        """
        state = self.state
        cfg = self.config

        dt_eff = float(cfg.dt_fixed if dt is None else dt) * float(cfg.time_scale)
        h = float(cfg.smoothing_radius)
        g = cfg.gravity_vector

        # (1) gravity seed, discards last step's force
        state.force[:] = g[None, :]

        ns = self._neighbor_search
        ns.build(state.pos)

        # (2) density from the full position set
        state.rho[:] = compute_density_summation(state=state, neighbor_search=ns, h=h)

        # (3) pressure + pairwise force + second gravity term
        accumulate_pressure_forces(
            state=state,
            neighbor_search=ns,
            h=h,
            rho0=cfg.rest_density,
            k=cfg.pressure_multiplier,
            gravity=g,
        )

        # (4) integrate and confine
        integrate_symplectic_euler(state, dt_eff)
        clamp_to_bounds(state, cfg.bounds)

        self.step_count += 1

        # (5) renderers
        if self._sinks:
            snapshot = state.positions_snapshot()
            for sink in self._sinks:
                sink(snapshot)

        return dt_eff

    def run(self, steps: int, dt: float | None = None) -> float:
        """Call step() `steps` times; returns the total simulated time."""
        total = 0.0
        for _ in range(int(steps)):
            total += self.step(dt)
        return total
