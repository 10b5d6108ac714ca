# src/ventthirds/providers.py
# Narrow view of the host: one image, one structure, and the conversions between them.
#
# Volume arrays follow the (Z, Y, X) index order used throughout; slices are
# handed out as (X, Y) so that slice[x, y] is the voxel at (x, y, z).

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import numpy as np
import trimesh

from ventthirds.geometry import VERTEX_STRIDE


class ImageProvider(Protocol):
    id: str

    @property
    def size(self) -> Tuple[int, int, int]:
        """(XSize, YSize, ZSize)"""

    def get_voxels(self, z: int) -> np.ndarray:
        """Raw samples of slice z, shape (XSize, YSize)."""

    def voxel_to_world(self, ijk: np.ndarray) -> np.ndarray:
        """(n, 3) voxel indices (x, y, z) -> (n, 3) world coordinates in mm."""

    def voxel_to_display(self, raw: np.ndarray) -> np.ndarray:
        """Raw samples -> display values (may contain NaN)."""


class StructureProvider(Protocol):
    id: str

    @property
    def is_empty(self) -> bool: ...

    def vertex_buffer(self) -> np.ndarray:
        """Flat [x, y, z, nx, ny, nz] per vertex, three vertices per triangle."""


@dataclass
class Selection:
    """What the host has open when a run starts."""

    image: Optional[ImageProvider]
    structure: Optional[StructureProvider]
    registered_image: Optional[ImageProvider] = None


# ---------------------------
# Image adapter
# ---------------------------
def voxel_affine(spacing_xyz, origin_xyz) -> np.ndarray:
    """4x4 affine mapping homogeneous (x, y, z, 1) voxel indices to world mm."""
    xform = np.eye(4)
    xform[:3, :3] = np.diag([float(s) for s in spacing_xyz])
    xform[:3, 3] = [float(o) for o in origin_xyz]
    return xform


class VolumeImage:
    """
    In-memory 3-D image.

    - array is (Z, Y, X) raw samples
    - affine maps voxel (x, y, z) to world (X, Y, Z) in mm
    - display = raw * slope + intercept
    """

    def __init__(self, array: np.ndarray, affine: np.ndarray | None = None,
                 slope: float = 1.0, intercept: float = 0.0, id: str = "image"):
        vol = np.asarray(array)
        if vol.ndim != 3:
            raise ValueError(f"image must be 3-D (Z, Y, X), got shape {vol.shape}")
        self.array = vol
        self.affine = np.eye(4) if affine is None else np.asarray(affine, dtype=float)
        self.slope = float(slope)
        self.intercept = float(intercept)
        self.id = id

    @classmethod
    def from_npz(cls, path: str, id: str | None = None) -> "VolumeImage":
        """
        Load an image saved with np.savez(_compressed).

        Keys: 'image' (Z, Y, X), optional 'spacing' (x, y, z), 'origin' (x, y, z),
        'slope', 'intercept'.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input image not found: {path}")
        with np.load(path) as data:
            if "image" not in data:
                raise ValueError(f"{path}: no 'image' array (found: {', '.join(data.files)})")
            array = data["image"]
            spacing = data["spacing"] if "spacing" in data else (1.0, 1.0, 1.0)
            origin = data["origin"] if "origin" in data else (0.0, 0.0, 0.0)
            slope = float(data["slope"]) if "slope" in data else 1.0
            intercept = float(data["intercept"]) if "intercept" in data else 0.0
        name = id or os.path.splitext(os.path.basename(path))[0]
        return cls(array, voxel_affine(spacing, origin), slope, intercept, id=name)

    @property
    def size(self) -> Tuple[int, int, int]:
        nz, ny, nx = self.array.shape
        return (nx, ny, nz)

    def get_voxels(self, z: int) -> np.ndarray:
        return self.array[z].T

    def voxel_to_world(self, ijk: np.ndarray) -> np.ndarray:
        ijk = np.asarray(ijk, dtype=float).reshape(-1, 3)
        homog = np.c_[ijk, np.ones(len(ijk))]
        return (self.affine @ homog.T).T[:, :3]

    def voxel_to_display(self, raw: np.ndarray) -> np.ndarray:
        return np.asarray(raw, dtype=float) * self.slope + self.intercept


# ---------------------------
# Structure adapter
# ---------------------------
def load_mesh(path: str) -> trimesh.Trimesh:
    """Load a mesh or Scene and concatenate parts if necessary."""
    mesh = trimesh.load(path, force="mesh")
    if isinstance(mesh, trimesh.Trimesh):
        return mesh
    parts = getattr(mesh, "geometry", {}).values()
    if not parts:
        raise ValueError("Scene has no geometry parts")
    return trimesh.util.concatenate(tuple(parts))


class MeshStructure:
    """A structure backed by a trimesh surface in world (mm) coordinates."""

    def __init__(self, mesh: trimesh.Trimesh | None, id: str = "structure"):
        self.mesh = mesh
        self.id = id

    @classmethod
    def from_file(cls, path: str, id: str | None = None) -> "MeshStructure":
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input mesh not found: {path}")
        name = id or os.path.splitext(os.path.basename(path))[0]
        return cls(load_mesh(path), id=name)

    @property
    def is_empty(self) -> bool:
        return self.mesh is None or len(self.mesh.faces) == 0

    def vertex_buffer(self) -> np.ndarray:
        if self.is_empty:
            return np.zeros(0, dtype=float)
        tri = self.mesh.triangles                          # (t, 3, 3)
        normals = np.repeat(self.mesh.face_normals[:, None, :], 3, axis=1)
        buf = np.concatenate([tri, normals], axis=2)       # (t, 3, 6)
        return buf.reshape(-1, VERTEX_STRIDE).ravel()
