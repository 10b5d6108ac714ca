# tests/geometry_test.py
import time

import numpy as np
import pytest
import trimesh

from ventthirds.errors import InvalidInput
from ventthirds.geometry import (BoundingBox, bounding_box_of, contains_points,
                                 is_inside, mesh_from_vertex_buffer, winding_numbers)
from ventthirds.providers import MeshStructure


def test_bounding_box_componentwise():
    bb = bounding_box_of([(1, 5, -2), (3, -1, 4), (2, 2, 2)])
    assert bb.lo == (1.0, -1.0, -2.0)
    assert bb.hi == (3.0, 5.0, 4.0)
    assert bb.extent == (2.0, 6.0, 6.0)


def test_bounding_box_single_point_is_degenerate_but_legal():
    bb = bounding_box_of([(1.5, 2.5, 3.5)])
    assert bb.lo == bb.hi
    assert bb.contains(np.array([[1.5, 2.5, 3.5]]))[0]


def test_bounding_box_empty_raises():
    with pytest.raises(InvalidInput):
        bounding_box_of([])


def test_bounding_box_contains_is_inclusive():
    bb = BoundingBox(lo=(0.0, 0.0, 0.0), hi=(1.0, 1.0, 0.0))
    pts = np.array([[0, 0, 0], [1, 1, 0], [0.5, 0.5, 0], [0.5, 0.5, 1e-6], [-1e-9, 0, 0]])
    assert bb.contains(pts).tolist() == [True, True, True, False, False]


def test_winding_number_of_closed_box(unit_box):
    w = winding_numbers(np.array([[0.0, 0.0, 0.0], [0.9, -0.9, 0.5], [3.0, 0.0, 0.0]]),
                        unit_box.vertices, unit_box.faces)
    assert abs(abs(w[0]) - 1.0) < 1e-2
    assert abs(abs(w[1]) - 1.0) < 1e-2
    assert abs(w[2]) < 1e-2


def test_winding_numbers_empty_inputs(unit_box):
    assert winding_numbers(np.zeros((0, 3)), unit_box.vertices, unit_box.faces).shape == (0,)
    assert winding_numbers(np.zeros((2, 3)), np.zeros((0, 3)), np.zeros((0, 3), int)).tolist() == [0.0, 0.0]


def test_is_inside_box_and_sphere(unit_box):
    assert is_inside((0.2, -0.3, 0.5), unit_box)
    assert not is_inside((1.5, 0.0, 0.0), unit_box)

    sphere = trimesh.creation.icosphere(subdivisions=3, radius=5.0)
    assert is_inside((0.0, 0.0, 4.0), sphere)
    assert not is_inside((0.0, 0.0, 5.5), sphere)
    assert not is_inside((4.9, 4.9, 0.0), sphere)


def test_containment_is_deterministic():
    sphere = trimesh.creation.icosphere(subdivisions=2, radius=3.0)
    rng = np.random.default_rng(7)
    pts = rng.uniform(-4, 4, size=(500, 3))
    first = contains_points(pts, sphere)
    for _ in range(3):
        assert np.array_equal(contains_points(pts, sphere), first)
    assert [is_inside(p, sphere) for p in pts[:20]] == first[:20].tolist()


def test_orientation_does_not_matter(unit_box):
    flipped = unit_box.copy()
    flipped.invert()
    pts = np.array([[0.0, 0.0, 0.0], [2.0, 2.0, 2.0]])
    assert contains_points(pts, flipped).tolist() == [True, False]


def test_mesh_from_vertex_buffer_discards_normals(unit_box):
    buf = MeshStructure(unit_box).vertex_buffer()
    assert buf.size == len(unit_box.faces) * 3 * 6
    mesh = mesh_from_vertex_buffer(buf)
    assert mesh.is_watertight
    assert np.allclose(mesh.bounds, unit_box.bounds)
    assert is_inside((0.0, 0.0, 0.0), mesh)


def test_mesh_from_vertex_buffer_rejects_partial_triangles():
    with pytest.raises(InvalidInput):
        mesh_from_vertex_buffer(np.zeros(6 * 4))
    with pytest.raises(InvalidInput):
        mesh_from_vertex_buffer([])


def test_dense_sphere_classification_at_grid_scale():
    """A 20480-face sphere against 200k points: correct and fast enough for voxel grids."""
    sphere = trimesh.creation.icosphere(subdivisions=5, radius=1.0)
    assert len(sphere.faces) == 20480
    pts = np.random.default_rng(11).uniform(-1.5, 1.5, size=(200_000, 3))
    r = np.linalg.norm(pts, axis=1)

    t0 = time.perf_counter()
    inside = contains_points(pts, sphere)
    elapsed = time.perf_counter() - t0

    clear = np.abs(r - 1.0) > 0.01
    assert np.array_equal(inside[clear], r[clear] < 1.0)
    assert elapsed < 20.0, f"classification took {elapsed:.1f}s"


def test_missing_igl_reports_install_hint(monkeypatch, capsys, unit_box):
    import ventthirds.geometry as geometry

    monkeypatch.setattr(geometry, "igl", None)
    with pytest.raises(ImportError):
        contains_points(np.zeros((1, 3)), unit_box)
    out = capsys.readouterr().out
    assert "[ERROR]" in out and "igl" in out
