"""Tests for the triangle mesh topology provider."""

import numpy as np
import pytest
import trimesh

from ctsimplify import TriMesh
from ctsimplify.utils import load_mesh

SQUARE = """OFF
4 2
0.0 0.0 0.0 1.0
1.0 0.0 0.0 0.0
1.0 1.0 0.0 1.0
0.0 1.0 0.0 2.0
0 0 1 2
1 0 2 3
"""


@pytest.fixture
def square_mesh(tmp_path):
    path = tmp_path / "square.txt"
    path.write_text(SQUARE)
    tri_mesh = TriMesh()
    tri_mesh.load_data(str(path))
    return tri_mesh


def test_counts(square_mesh):
    assert square_mesh.get_vertex_count() == 4
    assert square_mesh.get_max_degree() == 3


def test_star(square_mesh):
    assert square_mesh.get_star(0) == [1, 2, 3]
    assert square_mesh.get_star(1) == [0, 2]
    assert square_mesh.get_star(2) == [0, 1, 3]
    assert square_mesh.get_star(3) == [0, 2]


def test_function_values(square_mesh):
    assert square_mesh.get_function_value(3) == 2.0
    assert square_mesh.get_function_value(1) == 0.0


def test_less_than_breaks_ties_by_index(square_mesh):
    assert square_mesh.less_than(1, 0)
    assert square_mesh.less_than(0, 2)
    assert not square_mesh.less_than(2, 0)
    assert not square_mesh.less_than(3, 2)
    assert not square_mesh.less_than(0, 0)


def test_vertex_order(square_mesh):
    np.testing.assert_array_equal(square_mesh.vertex_order(), [1, 0, 2, 3])


def test_from_trimesh():
    mesh = trimesh.creation.icosphere(subdivisions=1)
    tri_mesh = TriMesh.from_trimesh(mesh, mesh.vertices[:, 2])

    assert tri_mesh.get_vertex_count() == len(mesh.vertices)
    # icosphere vertices have valence 5 or 6
    assert tri_mesh.get_max_degree() == 6
    order = tri_mesh.vertex_order()
    assert all(tri_mesh.less_than(a, b) for a, b in zip(order[:-1], order[1:]))


def test_load_mesh_keeps_vertex_ids(tmp_path):
    mesh = trimesh.creation.box()
    path = tmp_path / "box.ply"
    mesh.export(str(path))

    loaded = load_mesh(str(path))
    np.testing.assert_allclose(loaded.vertices, mesh.vertices)
    tri_mesh = TriMesh.from_trimesh(loaded, loaded.vertices[:, 2])
    assert tri_mesh.get_vertex_count() == 8


def test_from_trimesh_scalar_count():
    mesh = trimesh.creation.icosphere(subdivisions=1)
    with pytest.raises(ValueError):
        TriMesh.from_trimesh(mesh, np.zeros(3))


def test_truncated_file(tmp_path):
    path = tmp_path / "short.txt"
    path.write_text("OFF\n4 2\n0 0 0 1\n")
    with pytest.raises(ValueError, match="declares"):
        TriMesh().load_data(str(path))


def test_index_out_of_range(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("OFF\n3 1\n0 0 0 0\n1 0 0 1\n0 1 0 2\n0 0 1 5\n")
    with pytest.raises(ValueError, match="out of range"):
        TriMesh().load_data(str(path))
