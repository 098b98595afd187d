import io

import numpy as np

from sphfluid.core.config import Bounds
from sphfluid.core.state_builder import build_state
from sphfluid.io.ascii_render import AsciiRenderer, render_ascii
from sphfluid.io.csv_export import export_particles_csv
from sphfluid.io.vtk_export import export_particles_vtk_legacy


def _state():
    state = build_state(np.array([[0.0, 0.0], [0.5, -0.25], [0.9, 0.9]]))
    state.rho[:] = [1.0, 2.0, 3.0]
    state.p[:] = [-1.0, 0.0, 1.0]
    return state


def test_csv_export_writes_header_and_one_row_per_particle(tmp_path):
    path = tmp_path / "out" / "particles.csv"
    export_particles_csv(path, _state())

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "id,x,y,vx,vy,fx,fy,rho,p"
    assert len(lines) == 4

    table = np.loadtxt(path, delimiter=",", skiprows=1)
    assert np.allclose(table[:, 1:3], _state().pos)
    assert np.allclose(table[:, 7], [1.0, 2.0, 3.0])


def test_vtk_export_declares_points_and_fields(tmp_path):
    path = tmp_path / "particles.vtk"
    export_particles_vtk_legacy(path, _state())

    text = path.read_text(encoding="utf-8")
    assert text.startswith("# vtk DataFile Version 3.0\n")
    assert "POINTS 3 float" in text
    assert "VERTICES 3 6" in text
    assert "POINT_DATA 3" in text
    for field in ("SCALARS rho float 1", "SCALARS p float 1", "VECTORS v float", "VECTORS f float"):
        assert field in text


def test_render_ascii_places_particles_in_frame():
    bounds = Bounds(center=(0.0, 0.0), half_extent=1.0)
    positions = np.array([[-1.0, 1.0], [1.0, -1.0], [0.0, 0.0], [0.0, 0.0]])

    frame = render_ascii(positions, bounds, width=4, height=2)
    rows = frame.splitlines()

    assert rows[0] == "+----+"
    assert rows[-1] == "+----+"
    assert rows[1] == "|.   |"
    assert rows[2] == "|  o.|"


def test_ascii_renderer_sink_respects_every():
    bounds = Bounds(center=(0.0, 0.0), half_extent=1.0)
    stream = io.StringIO()
    sink = AsciiRenderer(bounds, width=4, height=2, every=2, stream=stream)

    sink(np.zeros((1, 2)))
    assert stream.getvalue() == ""

    sink(np.zeros((1, 2)))
    assert sink.last_frame is not None
    assert stream.getvalue().count("+----+") == 2
