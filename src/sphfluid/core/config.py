from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sphfluid.core.errors import ConfigurationError


NEIGHBOR_SEARCH_TYPES = ("brute_force", "spatial_hash")


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned square confinement region given by center and half-extent."""

    center: tuple[float, float]
    half_extent: float

    @property
    def min(self) -> np.ndarray:
        return np.array(self.center, dtype=np.float64) - float(self.half_extent)

    @property
    def max(self) -> np.ndarray:
        return np.array(self.center, dtype=np.float64) + float(self.half_extent)

    def contains(self, pos: np.ndarray) -> np.ndarray:
        """Per-particle bool mask, inclusive of the walls."""
        pos = np.asarray(pos, dtype=np.float64)
        return np.all((pos >= self.min[None, :]) & (pos <= self.max[None, :]), axis=1)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Tunables for one simulation run.

    The equation of state is linear, p_i = k (rho_i - rho0), and the kernel
    weights are (h - r)^2 for density and (h - r) for the pairwise pressure
    force, both with compact support r < h.

    Defaults are the values of the reference square scene. `viscosity` is
    carried for forward compatibility only; no term in the step uses it.
    """

    particle_count: int = 500
    smoothing_radius: float = 1.5
    pressure_multiplier: float = 200.0
    rest_density: float = 1.0
    gravity: float = -9.81

    bounds_center: tuple[float, float] = (0.0, 0.0)
    bounds_half_extent: float = 1.0

    viscosity: float = 0.1

    # Every dt handed to step() is multiplied by time_scale before integration.
    time_scale: float = 1.0
    dt_fixed: float = 1.0 / 60.0

    neighbor_search: str = "brute_force"

    @property
    def bounds(self) -> Bounds:
        return Bounds(center=self.bounds_center, half_extent=self.bounds_half_extent)

    @property
    def gravity_vector(self) -> np.ndarray:
        return np.array([0.0, float(self.gravity)], dtype=np.float64)

    def validate(self) -> None:
        count = self.particle_count
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count <= 0:
            raise ConfigurationError(f"particle_count must be a positive integer, got {self.particle_count!r}")

        for name in (
            "smoothing_radius",
            "pressure_multiplier",
            "rest_density",
            "gravity",
            "bounds_half_extent",
            "viscosity",
            "time_scale",
            "dt_fixed",
        ):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"{name} must be a number, got {getattr(self, name)!r}") from exc
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")

        if self.smoothing_radius <= 0.0:
            raise ConfigurationError(f"smoothing_radius must be > 0, got {self.smoothing_radius!r}")
        if self.rest_density < 0.0:
            raise ConfigurationError(f"rest_density must be >= 0, got {self.rest_density!r}")
        if self.bounds_half_extent <= 0.0:
            raise ConfigurationError(f"bounds_half_extent must be > 0, got {self.bounds_half_extent!r}")
        if self.time_scale <= 0.0:
            raise ConfigurationError(f"time_scale must be > 0, got {self.time_scale!r}")

        if len(self.bounds_center) != 2 or not all(math.isfinite(float(c)) for c in self.bounds_center):
            raise ConfigurationError(f"bounds_center must be a finite 2D point, got {self.bounds_center!r}")

        if self.neighbor_search not in NEIGHBOR_SEARCH_TYPES:
            raise ConfigurationError(
                f"neighbor_search must be one of {NEIGHBOR_SEARCH_TYPES}, got {self.neighbor_search!r}"
            )

    @classmethod
    def from_scene(cls, scene: dict) -> "SimulationConfig":
        """
        Build and validate a config from a parsed JSON scene.

        Recognised sections (all optional, defaults as above):
          fluid.count, neighbors.type, neighbors.support_radius,
          material.rest_density, material.viscosity, material.eos.k,
          forces.gravity, domain.center, domain.half_extent,
          time.dt_fixed, time.time_scale
        """
        defaults = cls()

        fluid = scene.get("fluid", {})
        neighbors = scene.get("neighbors", {})
        material = scene.get("material", {})
        forces = scene.get("forces", {})
        domain = scene.get("domain", {})
        time_cfg = scene.get("time", {})

        try:
            center = domain.get("center", list(defaults.bounds_center))
            cfg = cls(
                particle_count=int(fluid.get("count", defaults.particle_count)),
                smoothing_radius=float(neighbors.get("support_radius", defaults.smoothing_radius)),
                pressure_multiplier=float(material.get("eos", {}).get("k", defaults.pressure_multiplier)),
                rest_density=float(material.get("rest_density", defaults.rest_density)),
                gravity=float(forces.get("gravity", defaults.gravity)),
                bounds_center=(float(center[0]), float(center[1])),
                bounds_half_extent=float(domain.get("half_extent", defaults.bounds_half_extent)),
                viscosity=float(material.get("viscosity", defaults.viscosity)),
                time_scale=float(time_cfg.get("time_scale", defaults.time_scale)),
                dt_fixed=float(time_cfg.get("dt_fixed", defaults.dt_fixed)),
                neighbor_search=str(neighbors.get("type", defaults.neighbor_search)).lower(),
            )
        except (TypeError, ValueError, IndexError) as exc:
            raise ConfigurationError(f"malformed scene: {exc}") from exc

        cfg.validate()
        return cfg
