import numpy as np

from sphfluid.core.state_builder import build_state, grid_placement
from sphfluid.neighbors.brute_force import BruteForceNeighbors
from sphfluid.neighbors.spatial_hash import SpatialHash
from sphfluid.sph.density import compute_density_summation


def _density(pos, h, ns_cls=BruteForceNeighbors):
    state = build_state(pos)
    ns = ns_cls(support_radius=h)
    ns.build(state.pos)
    return compute_density_summation(state=state, neighbor_search=ns, h=h)


def test_isolated_particle_has_self_density_only():
    """
    A particle with nobody inside the smoothing radius keeps exactly its self term h^2.
    """
    h = 1.5
    pos = np.array([[0.0, 0.0], [5.0, 0.0]])

    rho = _density(pos, h)
    assert rho[0] == h * h
    assert rho[1] == h * h


def test_two_particle_density_sum():
    """
    (h - 0)^2 + (h - 0.5)^2 = 2.25 + 1.0 for both particles.
    """
    h = 1.5
    pos = np.array([[0.0, 0.0], [0.0, 0.5]])

    rho = _density(pos, h)
    assert np.allclose(rho, 3.25)


def test_coincident_particles_count_each_other_in_density():
    h = 1.0
    pos = np.array([[0.2, 0.2], [0.2, 0.2]])

    rho = _density(pos, h)
    assert np.allclose(rho, 2.0 * h * h)


def test_density_is_non_negative_and_grows_with_clustering():
    h = 0.5
    loose = grid_placement([0.0, 0.0], [2.0, 2.0], 0.4)
    tight = grid_placement([0.0, 0.0], [1.0, 1.0], 0.2)

    rho_loose = _density(loose, h)
    rho_tight = _density(tight, h)

    assert np.all(rho_loose >= 0.0)
    assert np.all(rho_tight >= 0.0)
    assert rho_tight.max() > rho_loose.max()


def test_density_identical_with_spatial_hash():
    h = 0.35
    rng = np.random.default_rng(3)
    pos = rng.uniform(-1.0, 1.0, size=(120, 2))

    rho_bf = _density(pos, h, BruteForceNeighbors)
    rho_sh = _density(pos, h, SpatialHash)
    assert np.allclose(rho_bf, rho_sh, rtol=0.0, atol=1e-12)
