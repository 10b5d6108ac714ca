# tests/sampler_test.py
import numpy as np
import trimesh

from conftest import FakeImage, box_mesh
from ventthirds.geometry import bounding_box_of, contains_points
from ventthirds.sampler import scan_inside, slice_indices


def _hit_set(hits):
    return {tuple(int(v) for v in row) for h in hits for row in h.indices}


def test_slice_indices_cover_slice():
    idx = slice_indices(3, 2, 5)
    assert idx.shape == (6, 3)
    assert set(map(tuple, idx.tolist())) == {(x, y, 5) for x in range(3) for y in range(2)}


def test_pruning_matches_brute_force():
    raw = np.zeros((10, 10, 10))
    image = FakeImage(raw, spacing=(1.0, 1.0, 1.2), origin=(-0.3, 0.1, -0.2))
    mesh = trimesh.creation.icosphere(subdivisions=2, radius=3.3)
    mesh.apply_translation((4.2, 4.1, 5.4))
    bbox = bounding_box_of(mesh.vertices)

    pruned = _hit_set(scan_inside(image, mesh, bbox, prune=True))
    brute = _hit_set(scan_inside(image, mesh, bbox, prune=False))
    assert pruned
    assert pruned == brute

    # same set as testing every voxel centre directly
    all_idx = np.indices((10, 10, 10)).reshape(3, -1).T
    direct = contains_points(image.voxel_to_world(all_idx), mesh)
    assert pruned == {tuple(int(v) for v in row) for row in all_idx[direct]}


def test_hits_carry_world_coordinates_and_raw_samples():
    raw = np.arange(4 * 3 * 2, dtype=float).reshape(4, 3, 2)
    image = FakeImage(raw, spacing=(2.0, 2.0, 2.0), origin=(10.0, 0.0, 0.0))
    mesh = box_mesh((13.0, 2.0, 1.0), (8.0, 8.0, 8.0))
    hits = list(scan_inside(image, mesh, bounding_box_of(mesh.vertices)))

    assert [h.z for h in hits] == [0, 1]
    for h in hits:
        assert np.allclose(h.world, image.voxel_to_world(h.indices))
        assert np.array_equal(h.raw, raw[h.indices[:, 0], h.indices[:, 1], h.indices[:, 2]])
    assert sum(len(h.raw) for h in hits) == raw.size


def test_slices_outside_bbox_are_not_read():
    image = FakeImage(np.ones((5, 5, 10)))
    mesh = box_mesh((2.0, 2.0, 2.0), (6.0, 6.0, 3.0))
    list(scan_inside(image, mesh, bounding_box_of(mesh.vertices)))
    assert image.slices_read == [1, 2, 3]


def test_empty_grid_yields_nothing(unit_box):
    for shape in [(0, 4, 4), (4, 0, 4), (4, 4, 0)]:
        image = FakeImage(np.zeros(shape))
        assert list(scan_inside(image, unit_box, bounding_box_of(unit_box.vertices))) == []


def test_mesh_partly_outside_grid_reduces_sample_count():
    image = FakeImage(np.ones((10, 10, 10)))
    mesh = box_mesh((2.0, 2.0, 2.0), (11.0, 11.0, 11.0))     # [-3.5, 7.5]^3
    hits = _hit_set(scan_inside(image, mesh, bounding_box_of(mesh.vertices)))
    assert len(hits) == 8 ** 3
    assert all(0 <= c <= 7 for v in hits for c in v)
