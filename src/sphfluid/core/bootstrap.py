"""
Bootstrap / CLI entry point for the 2D SPH fluid.

What this file does:
- Loads a JSON scene configuration and validates it before anything is spawned.
- Spawns the initial placement (uniform in the bounds square, or a block).
- Runs the fixed-order step loop (gravity seed -> density -> pressure/force
  -> integrate/clamp) for `time.steps` steps.
- Logs per-step diagnostics (speed/rho/p/neighbors).
- Optionally exports CSV and VTK snapshots and draws ASCII frames.

Important constraint:
- This file must not change any solver math. It only wires together
  existing components and adds observability/export around them.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import numpy as np

from sphfluid.core.config import SimulationConfig
from sphfluid.core.diagnostics import compute_step_diagnostics
from sphfluid.core.errors import ConfigurationError
from sphfluid.core.simulator import FluidSimulation
from sphfluid.core.state_builder import placement_from_scene
from sphfluid.io.ascii_render import AsciiRenderer
from sphfluid.io.csv_export import export_particles_csv
from sphfluid.io.vtk_export import export_particles_vtk_legacy
from sphfluid.logging_config import setup_logging
from sphfluid.neighbors.brute_force import make_neighbor_search

logger = logging.getLogger(__name__)


def run_scene(scene: dict) -> FluidSimulation:
    """Build and run the simulation described by a parsed scene."""
    # Config errors surface here, before the spawner or any renderer runs.
    cfg = SimulationConfig.from_scene(scene)
    sim = FluidSimulation(cfg)

    seed = scene.get("meta", {}).get("seed", None)
    rng = np.random.default_rng(seed)
    sim.place(placement_from_scene(scene, cfg, rng=rng), velocities=scene.get("fluid", {}).get("initial_velocity"))

    time_cfg = scene.get("time", {})
    steps = int(time_cfg.get("steps", 50))
    log_every = int(time_cfg.get("log_every", 10))

    # -------------------------------------------------------------------------
    # Optional outputs controlled by scene:
    #   export.csv.enable/every/dir
    #   export.vtk.enable/every/dir
    #   render.ascii.enable/every/width/height
    # -------------------------------------------------------------------------
    export_cfg = scene.get("export", {})

    csv_cfg = export_cfg.get("csv", {})
    csv_enabled = bool(csv_cfg.get("enable", False))
    csv_every = int(csv_cfg.get("every", 10))
    csv_dir = Path(csv_cfg.get("dir", "out/csv"))

    vtk_cfg = export_cfg.get("vtk", {})
    vtk_enabled = bool(vtk_cfg.get("enable", False))
    vtk_every = int(vtk_cfg.get("every", 10))
    vtk_dir = Path(vtk_cfg.get("dir", "out/vtk"))

    ascii_cfg = scene.get("render", {}).get("ascii", {})
    if bool(ascii_cfg.get("enable", False)):
        sim.add_sink(
            AsciiRenderer(
                cfg.bounds,
                width=int(ascii_cfg.get("width", 40)),
                height=int(ascii_cfg.get("height", 20)),
                every=int(ascii_cfg.get("every", 10)),
            )
        )

    # Export step 0000 if enabled (pre-step snapshot)
    if csv_enabled:
        export_particles_csv(csv_dir / "particles_step_0000.csv", sim.state)
    if vtk_enabled:
        export_particles_vtk_legacy(vtk_dir / "particles_step_0000.vtk", sim.state)

    for s in range(steps):
        dt_eff = sim.step()

        if (s == 0) or ((s + 1) % max(1, log_every) == 0):
            # Diagnostics neighbor search on current positions (read-only)
            ns = make_neighbor_search(cfg.neighbor_search, cfg.smoothing_radius)
            ns.build(sim.state.pos)
            diag = compute_step_diagnostics(
                step=s + 1,
                dt=dt_eff,
                state=sim.state,
                neighbor_search=ns,
                bounds=cfg.bounds,
            )
            logger.info(diag.format_line())

        if csv_enabled and ((s + 1) % max(1, csv_every) == 0):
            export_particles_csv(csv_dir / f"particles_step_{s + 1:04d}.csv", sim.state)

        if vtk_enabled and ((s + 1) % max(1, vtk_every) == 0):
            export_particles_vtk_legacy(vtk_dir / f"particles_step_{s + 1:04d}.vtk", sim.state)

    return sim


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    setup_logging(logging.INFO)

    if len(argv) < 1:
        logger.error("Usage: python -m sphfluid.core.bootstrap <scene.json>")
        return 2

    scene_path = Path(argv[0]).resolve()
    if not scene_path.exists():
        logger.error("scene file not found: %s", scene_path)
        return 1

    with scene_path.open("r", encoding="utf-8") as f:
        scene = json.load(f)

    logger.info("scene=%s", scene.get("meta", {}).get("name", scene_path.stem))

    try:
        run_scene(scene)
    except ConfigurationError as exc:
        logger.error("invalid scene: %s", exc)
        return 1

    logger.info("done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
