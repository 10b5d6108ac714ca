"""Cross-platform example runner for demo_sphere"""
from pathlib import Path

import numpy as np
import trimesh

from ventthirds.core import load_selection, run_thirds

repo_root = Path(__file__).resolve().parents[1]
out_dir = repo_root / "examples" / "outputs"
out_dir.mkdir(parents=True, exist_ok=True)

# 64^3 ventilation-like volume: intensity grows along x, 2 mm voxels centred on the origin
n, s = 64, 2.0
zz, yy, xx = np.indices((n, n, n))
image = (10 + 90 * xx / (n - 1) + np.random.default_rng(0).normal(0, 2, (n, n, n))).astype(np.float32)
origin = np.full(3, -(n - 1) * s / 2)
image_path = out_dir / "sphere_vent.npz"
np.savez_compressed(image_path, image=image, spacing=np.array([s, s, s]), origin=origin)

mesh_path = out_dir / "sphere.stl"
trimesh.creation.icosphere(subdivisions=3, radius=40.0).export(str(mesh_path))

run_thirds(load_selection(str(image_path), str(mesh_path), "Sphere"), sink=print, verbose=True)
