# tests/conftest.py
import numpy as np
import pytest
import trimesh

from ventthirds.providers import MeshStructure


class FakeImage:
    """Image provider over an (X, Y, Z) array with an axis-aligned voxel grid."""

    def __init__(self, raw_xyz, spacing=(1.0, 1.0, 1.0), origin=(0.0, 0.0, 0.0),
                 display=None, id="fake"):
        self.raw = np.asarray(raw_xyz)
        self.spacing = np.asarray(spacing, dtype=float)
        self.origin = np.asarray(origin, dtype=float)
        self.display = display or (lambda r: np.asarray(r, dtype=float))
        self.id = id
        self.slices_read = []

    @property
    def size(self):
        return tuple(self.raw.shape)

    def get_voxels(self, z):
        self.slices_read.append(z)
        return self.raw[:, :, z]

    def voxel_to_world(self, ijk):
        return self.origin + np.asarray(ijk, dtype=float) * self.spacing

    def voxel_to_display(self, raw):
        return self.display(raw)


def box_mesh(center, extents):
    return trimesh.creation.box(extents=extents,
                                transform=trimesh.transformations.translation_matrix(center))


def structure(mesh, id="Lung"):
    return MeshStructure(mesh, id=id)


@pytest.fixture
def unit_box():
    """Closed box spanning [-1, 1] on every axis."""
    return box_mesh((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))


@pytest.fixture
def row_of_99():
    """99 voxels along x holding 1..99, and a box enclosing all of them."""
    raw = np.arange(1, 100, dtype=float).reshape(99, 1, 1)
    return FakeImage(raw), box_mesh((49.0, 0.0, 0.0), (99.0, 1.0, 1.0))
