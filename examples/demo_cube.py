"""Cross-platform example runner for demo_cube"""
from pathlib import Path

import numpy as np
import trimesh

from ventthirds.core import load_selection, run_thirds

repo_root = Path(__file__).resolve().parents[1]
out_dir = repo_root / "examples" / "outputs"
out_dir.mkdir(parents=True, exist_ok=True)

# 99 voxels in a row holding 1..99; the box encloses all of them
image = np.arange(1, 100, dtype=np.float32).reshape(1, 1, 99)
image_path = out_dir / "cube_vent.npz"
np.savez_compressed(image_path, image=image)

box = trimesh.creation.box(extents=(99.0, 1.0, 1.0),
                           transform=trimesh.transformations.translation_matrix((49.0, 0.0, 0.0)))
mesh_path = out_dir / "cube.stl"
box.export(str(mesh_path))

run_thirds(load_selection(str(image_path), str(mesh_path), "Cube"), sink=print, verbose=True)
