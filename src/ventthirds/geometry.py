# src/ventthirds/geometry.py
# Axis-aligned bounding boxes and point-in-mesh classification by winding number.

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import trimesh

# libigl for fast winding number
try:
    import igl  # pip: igl, conda: igl (conda-forge)
except Exception:
    igl = None

from ventthirds.console import err, warn
from ventthirds.errors import InvalidInput

# host vertex buffers interleave position and normal: x, y, z, nx, ny, nz
VERTEX_STRIDE = 6

# query points passed to igl per call
CHUNK_POINTS = 1_000_000


@dataclass(frozen=True)
class BoundingBox:
    lo: Tuple[float, float, float]
    hi: Tuple[float, float, float]

    def contains(self, points: np.ndarray) -> np.ndarray:
        """Inclusive range check on all three axes. points: (n, 3) -> (n,) bool."""
        p = np.asarray(points, dtype=float).reshape(-1, 3)
        lo = np.asarray(self.lo)
        hi = np.asarray(self.hi)
        return np.all((p >= lo) & (p <= hi), axis=1)

    @property
    def extent(self) -> Tuple[float, float, float]:
        return tuple(float(h - l) for l, h in zip(self.lo, self.hi))


def bounding_box_of(points) -> BoundingBox:
    p = np.asarray(points, dtype=float)
    if p.size == 0:
        raise InvalidInput("cannot build a bounding box from an empty point set")
    p = p.reshape(-1, 3)
    lo = p.min(axis=0)
    hi = p.max(axis=0)
    return BoundingBox(lo=tuple(float(v) for v in lo), hi=tuple(float(v) for v in hi))


def mesh_from_vertex_buffer(buffer) -> trimesh.Trimesh:
    """
    Build a triangle mesh from a flat host vertex buffer.

    Each vertex occupies VERTEX_STRIDE floats (position followed by its normal,
    which is discarded); three consecutive vertices form one triangle.
    Coincident vertices are merged so watertightness can be reported, but the
    mesh is never repaired.
    """
    raw = np.asarray(buffer, dtype=float).ravel()
    if raw.size == 0:
        raise InvalidInput("structure mesh has no vertices")
    if raw.size % (VERTEX_STRIDE * 3) != 0:
        raise InvalidInput(
            f"vertex buffer length {raw.size} is not a whole number of triangles "
            f"({VERTEX_STRIDE} floats per vertex, 3 vertices per triangle)")
    verts = raw.reshape(-1, VERTEX_STRIDE)[:, :3]
    faces = np.arange(len(verts)).reshape(-1, 3)
    mesh = trimesh.Trimesh(vertices=verts, faces=faces, process=True)
    if not mesh.is_watertight:
        warn(f"[mesh] mesh is not watertight ({len(mesh.faces)} faces); "
             "inside/outside classification is undefined near open edges")
    return mesh


def _require_igl():
    if igl is None:
        err("libigl is required for point-in-mesh classification. "
            "Install it with `pip install igl` or `conda install -c conda-forge igl`.")
        raise ImportError("igl is not installed")
    return igl


def winding_numbers(points: np.ndarray, vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """
    Generalised winding number of each point with respect to a triangle mesh,
    using libigl's fast winding number.

    Parameters
    ----------
    points : (n, 3) float array
    vertices : (v, 3) float array
    faces : (f, 3) int array

    Returns
    -------
    (n,) float array; about +-1 inside a closed surface and 0 outside
    """
    Q = np.ascontiguousarray(np.asarray(points, dtype=np.float64).reshape(-1, 3))
    V = np.ascontiguousarray(np.asarray(vertices, dtype=np.float64).reshape(-1, 3))
    F = np.ascontiguousarray(np.asarray(faces, dtype=np.int64).reshape(-1, 3))
    out = np.zeros(len(Q), dtype=float)
    if len(Q) == 0 or len(F) == 0:
        return out

    lib = _require_igl()
    for start in range(0, len(Q), CHUNK_POINTS):
        q = Q[start:start + CHUNK_POINTS]
        out[start:start + len(q)] = np.asarray(
            lib.fast_winding_number_for_meshes(V, F, q)).ravel()
    return out


def contains_points(points: np.ndarray, mesh: trimesh.Trimesh) -> np.ndarray:
    """
    Vectorised containment test. Inside means |winding number| > 0.5, so the
    result does not depend on triangle orientation. Only meaningful for a
    closed (watertight) mesh.
    """
    w = winding_numbers(points, mesh.vertices, mesh.faces)
    return np.abs(w) > 0.5


def is_inside(point, mesh: trimesh.Trimesh) -> bool:
    return bool(contains_points(np.asarray(point, dtype=float).reshape(1, 3), mesh)[0])
