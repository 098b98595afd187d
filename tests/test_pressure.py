import numpy as np

from sphfluid.core.state_builder import build_state
from sphfluid.neighbors.brute_force import BruteForceNeighbors
from sphfluid.sph.pressure import (
    accumulate_pressure_forces,
    pressure_force_pairwise,
    pressure_state_equation_linear,
)


def _state_with_pressure(pos, p):
    state = build_state(pos)
    state.p[:] = p
    return state


def test_state_equation_is_linear_and_not_clamped():
    rho = np.array([0.5, 1.0, 3.0])
    p = pressure_state_equation_linear(rho, rho0=1.0, k=200.0)
    assert np.allclose(p, [-100.0, 0.0, 400.0])


def test_pairwise_force_points_toward_neighbor_for_positive_pressure():
    """
    direction = (x_j - x_i) / r, weight = h - r, scaled by the mean pressure.
    """
    h = 1.0
    state = _state_with_pressure(np.array([[0.0, 0.0], [0.5, 0.0]]), [2.0, 4.0])
    ns = BruteForceNeighbors(support_radius=h)

    f = pressure_force_pairwise(state, neighbor_search=ns, h=h)

    # (h - r) * (p_i + p_j) / 2 = 0.5 * 3.0
    assert np.allclose(f[0], [1.5, 0.0])
    assert np.allclose(f[1], [-1.5, 0.0])


def test_negative_pressure_reverses_direction():
    h = 1.0
    state = _state_with_pressure(np.array([[0.0, 0.0], [0.0, 0.25]]), [-1.0, -1.0])
    ns = BruteForceNeighbors(support_radius=h)

    f = pressure_force_pairwise(state, neighbor_search=ns, h=h)

    assert np.allclose(f[0], [0.0, -0.75])
    assert np.allclose(f[1], [0.0, 0.75])


def test_each_side_accumulates_its_own_sum():
    """
    No action-reaction shortcut: with a third particle only near one member
    of a pair, the two sums differ.
    """
    h = 1.0
    pos = np.array([[0.0, 0.0], [0.6, 0.0], [1.4, 0.0]])
    state = _state_with_pressure(pos, [1.0, 1.0, 1.0])
    ns = BruteForceNeighbors(support_radius=h)

    f = pressure_force_pairwise(state, neighbor_search=ns, h=h)

    assert np.allclose(f[0], [0.4, 0.0])
    assert np.allclose(f[1], [-0.4 + 0.2, 0.0])
    assert np.allclose(f[2], [-0.2, 0.0])


def test_coincident_particles_do_not_push_each_other():
    h = 1.0
    state = _state_with_pressure(np.array([[0.1, 0.1], [0.1, 0.1]]), [10.0, 10.0])
    ns = BruteForceNeighbors(support_radius=h)

    f = pressure_force_pairwise(state, neighbor_search=ns, h=h)
    assert np.all(np.isfinite(f))
    assert np.allclose(f, 0.0)


def test_accumulate_adds_on_top_of_existing_force_and_adds_gravity():
    h = 1.0
    state = build_state(np.array([[0.0, 0.0], [5.0, 0.0]]))
    state.rho[:] = [1.0, 1.0]
    state.force[:] = [[0.0, -9.81], [0.0, -9.81]]
    ns = BruteForceNeighbors(support_radius=h)

    accumulate_pressure_forces(
        state,
        neighbor_search=ns,
        h=h,
        rho0=3.0,
        k=2.0,
        gravity=np.array([0.0, -9.81]),
    )

    assert np.allclose(state.p, [-4.0, -4.0])
    assert np.allclose(state.force, [[0.0, -19.62], [0.0, -19.62]])
