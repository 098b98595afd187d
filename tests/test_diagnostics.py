import numpy as np
import pytest

import sphfluid.core.diagnostics
import sphfluid.io.ascii_render
import sphfluid.io.csv_export
import sphfluid.io.vtk_export
from sphfluid.core.config import SimulationConfig
from sphfluid.core.diagnostics import compute_step_diagnostics
from sphfluid.core.simulator import FluidSimulation
from sphfluid.core.state import ParticleState
from sphfluid.neighbors.brute_force import BruteForceNeighbors


def test_step_diagnostics_report_state_after_step():
    cfg = SimulationConfig(particle_count=2, smoothing_radius=1.5, pressure_multiplier=2.0, bounds_half_extent=10.0)
    sim = FluidSimulation(cfg, positions=[[0.0, 0.0], [0.0, 0.5]])
    dt_eff = sim.step(0.01)

    ns = BruteForceNeighbors(support_radius=cfg.smoothing_radius)
    ns.build(sim.state.pos)
    diag = compute_step_diagnostics(step=1, dt=dt_eff, state=sim.state, neighbor_search=ns, bounds=cfg.bounds)

    assert diag.n_particles == 2
    assert np.isclose(diag.rho_min, 3.25)
    assert np.isclose(diag.rho_max, 3.25)
    assert np.isclose(diag.p_mean, 4.5)
    assert diag.neigh_min == 1
    assert diag.neigh_max == 1
    assert diag.n_on_wall == 0
    assert diag.v_max == pytest.approx(float(np.max(np.linalg.norm(sim.state.vel, axis=1))))
    assert diag.format_line().startswith("[STEP 0001]")


def test_step_diagnostics_count_particles_on_wall():
    cfg = SimulationConfig(particle_count=1, pressure_multiplier=0.0)
    sim = FluidSimulation(cfg, positions=[[0.0, -0.99]])
    sim.step(0.1)

    ns = BruteForceNeighbors(support_radius=cfg.smoothing_radius)
    diag = compute_step_diagnostics(step=1, dt=0.1, state=sim.state, neighbor_search=ns, bounds=cfg.bounds)
    assert diag.n_on_wall == 1


def test_particle_state_is_two_dimensional():
    n = 3
    state = ParticleState(
        pos=np.zeros((n, 3)),
        vel=np.zeros((n, 2)),
        force=np.zeros((n, 2)),
        rho=np.zeros((n,)),
        p=np.zeros((n,)),
    )
    with pytest.raises(ValueError):
        state.validate()


@pytest.mark.parametrize(
    "module",
    [sphfluid.core.diagnostics, sphfluid.io.ascii_render, sphfluid.io.csv_export, sphfluid.io.vtk_export],
)
def test_observability_modules_carry_docstrings(module):
    assert module.__doc__ is not None
    assert module.__doc__.strip()
