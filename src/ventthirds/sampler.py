# src/ventthirds/sampler.py
# Slice-by-slice scan of the image grid for voxels inside the structure mesh.

from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np
import trimesh

from ventthirds.geometry import BoundingBox, contains_points
from ventthirds.providers import ImageProvider


class SliceHits(NamedTuple):
    z: int
    indices: np.ndarray   # (n, 3) int voxel indices (x, y, z)
    world: np.ndarray     # (n, 3) world coordinates, mm
    raw: np.ndarray       # (n,) raw samples


def slice_indices(nx: int, ny: int, z: int) -> np.ndarray:
    """All (x, y, z) voxel indices of one slice, x-major to match slice[x, y]."""
    xs, ys = np.meshgrid(np.arange(nx), np.arange(ny), indexing="ij")
    return np.stack((xs.ravel(), ys.ravel(), np.full(nx * ny, z)), axis=1)


def scan_inside(image: ImageProvider, mesh: trimesh.Trimesh, bbox: BoundingBox,
                prune: bool = True) -> Iterator[SliceHits]:
    """
    Yield, for every z-slice, the voxels whose world coordinate lies inside mesh.

    With prune=True only voxels inside the (inclusive) bounding box are passed
    to the winding-number test; the set of hits is the same either way.
    Non-positive extents give an empty scan.
    """
    nx, ny, nz = (int(v) for v in image.size)
    if nx <= 0 or ny <= 0 or nz <= 0:
        return

    for z in range(nz):
        idx = slice_indices(nx, ny, z)
        world = image.voxel_to_world(idx)
        if prune:
            keep = bbox.contains(world)
            if not np.any(keep):
                continue
            idx, world = idx[keep], world[keep]

        inside = contains_points(world, mesh)
        if not np.any(inside):
            continue

        idx, world = idx[inside], world[inside]
        voxels = np.asarray(image.get_voxels(z))
        raw = voxels[idx[:, 0], idx[:, 1]]
        yield SliceHits(z=z, indices=idx, world=world, raw=raw)
