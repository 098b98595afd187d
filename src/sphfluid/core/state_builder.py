from __future__ import annotations

import logging

import numpy as np

from sphfluid.core.config import SimulationConfig
from sphfluid.core.errors import ConfigurationError
from sphfluid.core.state import ParticleState

logger = logging.getLogger(__name__)


def grid_placement(pmin, pmax, spacing: float) -> np.ndarray:
    """
    Regular block of points in [pmin, pmax] (inclusive-ish) with the given spacing.
    """
    spacing = float(spacing)
    if spacing <= 0:
        raise ConfigurationError("spacing must be > 0")

    pmin = np.asarray(pmin, dtype=np.float64)
    pmax = np.asarray(pmax, dtype=np.float64)
    if pmin.shape != (2,) or pmax.shape != (2,):
        raise ConfigurationError("block min/max must be 2D points")

    # +1e-12 to avoid floating issues at the upper edge
    xs = np.arange(pmin[0], pmax[0] + 1e-12, spacing, dtype=np.float64)
    ys = np.arange(pmin[1], pmax[1] + 1e-12, spacing, dtype=np.float64)
    X, Y = np.meshgrid(xs, ys, indexing="xy")
    return np.stack([X.ravel(), Y.ravel()], axis=1)


def sample_uniform_placement(config: SimulationConfig, rng: np.random.Generator | None = None) -> np.ndarray:
    """
    Spawn `config.particle_count` positions uniformly inside the bounds square.
    """
    config.validate()
    rng = rng if rng is not None else np.random.default_rng()

    lo = config.bounds.min
    hi = config.bounds.max
    pos = rng.uniform(lo, hi, size=(int(config.particle_count), 2))

    logger.debug("sampled %d uniform positions in [%s, %s]", pos.shape[0], lo, hi)
    return pos


def placement_from_scene(scene: dict, config: SimulationConfig, rng: np.random.Generator | None = None) -> np.ndarray:
    """
    Spawner used by the CLI.

    fluid.type:
      "uniform" (default): particle_count random positions inside the bounds
      "block": regular grid from fluid.min to fluid.max with fluid.spacing;
               the grid size must equal particle_count
    """
    fluid = scene.get("fluid", {})
    kind = str(fluid.get("type", "uniform")).lower()

    if kind == "uniform":
        return sample_uniform_placement(config, rng=rng)

    if kind == "block":
        try:
            pos = grid_placement(fluid["min"], fluid["max"], float(fluid["spacing"]))
        except ConfigurationError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"block fluid needs numeric min, max and spacing: {exc!r}") from exc
        if pos.shape[0] != config.particle_count:
            raise ConfigurationError(
                f"block produces {pos.shape[0]} particles but fluid.count is {config.particle_count}"
            )
        return pos

    raise ConfigurationError(f"unsupported fluid type: {kind!r}")


def build_state(
    positions,
    velocities=None,
    expected_count: int | None = None,
) -> ParticleState:
    """
    Wrap an initial placement into a ParticleState.

    Velocities default to zero; force, density and pressure start at zero and
    are overwritten on the first step.
    """
    pos = np.array(positions, dtype=np.float64)
    if pos.ndim != 2 or pos.shape[1] != 2:
        raise ConfigurationError(f"positions must have shape (N, 2), got {pos.shape}")

    n = pos.shape[0]
    if expected_count is not None and n != int(expected_count):
        raise ConfigurationError(f"placement has {n} positions but particle_count is {expected_count}")

    if velocities is None:
        vel = np.zeros((n, 2), dtype=np.float64)
    else:
        vel = np.array(velocities, dtype=np.float64)
        if vel.shape == (2,):
            vel = np.repeat(vel[None, :], n, axis=0)

    state = ParticleState(
        pos=pos,
        vel=vel,
        force=np.zeros((n, 2), dtype=np.float64),
        rho=np.zeros((n,), dtype=np.float64),
        p=np.zeros((n,), dtype=np.float64),
    )

    try:
        state.validate()
    except ValueError as exc:
        raise ConfigurationError(f"invalid initial placement: {exc}") from exc

    return state
