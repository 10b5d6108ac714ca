# src/ventthirds/core.py
# Selection -> structure mesh + bounding box -> inside voxels -> display values
# -> volumetric-thirds thresholds -> one report delivered to a sink.
#
# Example:
#   python -m ventthirds.core --image data/vent.npz --structure data/lung.stl

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ventthirds.collector import ValueCollector, collect_values
from ventthirds.config import DEFAULT_CONFIG, ThirdsConfig
from ventthirds.console import info
from ventthirds.errors import (EmptySelection, InvalidInput,
                               MultiImageNotSupported, ThirdsError)
from ventthirds.geometry import bounding_box_of, mesh_from_vertex_buffer
from ventthirds.providers import MeshStructure, Selection, VolumeImage
from ventthirds.report import ReportSink, format_report
from ventthirds.sampler import scan_inside
from ventthirds.thresholds import ThresholdResult, compute_thresholds


@dataclass
class ThirdsRun:
    structure_id: str
    result: ThresholdResult
    values: np.ndarray
    nan_seen: bool
    report: str


def check_selection(selection: Selection) -> None:
    """Preconditions checked before any geometry work, in host order."""
    if selection.registered_image is not None:
        raise MultiImageNotSupported()
    if selection.structure is None or selection.structure.is_empty:
        raise EmptySelection()
    if selection.image is None:
        raise InvalidInput("No image is open. Please open the ventilation image and retry.")


def collect_structure_values(selection: Selection, config: ThirdsConfig = DEFAULT_CONFIG,
                             verbose: bool = False) -> ValueCollector:
    """Scan the image and return the filtered display values inside the structure."""
    check_selection(selection)
    image, structure = selection.image, selection.structure

    mesh = mesh_from_vertex_buffer(structure.vertex_buffer())
    bbox = bounding_box_of(mesh.vertices)
    if verbose:
        info(f"[mesh] '{structure.id}': {len(mesh.faces)} faces | "
             f"closed={bool(mesh.is_watertight)} | bbox lo={bbox.lo} hi={bbox.hi}")

    collector = collect_values(scan_inside(image, mesh, bbox), image, config)
    if verbose:
        nx, ny, nz = image.size
        info(f"[scan] image '{image.id}' {nx}x{ny}x{nz} | kept {len(collector)} values | "
             f"nan={collector.nan_seen}")
    return collector


def compute_volumetric_thirds(selection: Selection, config: ThirdsConfig = DEFAULT_CONFIG,
                              verbose: bool = False) -> ThirdsRun:
    """Full pass; raises ThirdsError subclasses for every abort path."""
    config.validate()
    collector = collect_structure_values(selection, config, verbose=verbose)
    values = collector.values
    result = compute_thresholds(values, config, nan_seen=collector.nan_seen)
    if verbose:
        info(f"[thirds] min={result.minimum} | lower split={result.lower_below}/{result.lower_above} "
             f"| upper split={result.upper_below}/{result.upper_above} | max={result.maximum}")
    structure_id = selection.structure.id
    return ThirdsRun(structure_id=structure_id, result=result, values=values,
                     nan_seen=collector.nan_seen,
                     report=format_report(result, structure_id, config))


def run_thirds(selection: Selection, sink: ReportSink, config: ThirdsConfig = DEFAULT_CONFIG,
               verbose: bool = False) -> Optional[ThirdsRun]:
    """
    Run once and hand exactly one message to `sink`: the report on success,
    the error text when the run aborts. Returns None on abort.
    """
    try:
        run = compute_volumetric_thirds(selection, config, verbose=verbose)
    except ThirdsError as e:
        sink(str(e))
        return None
    sink(run.report)
    return run


def load_selection(image_path: str, structure_path: str,
                   structure_id: str | None = None) -> Selection:
    image = VolumeImage.from_npz(image_path)
    structure = MeshStructure.from_file(structure_path, id=structure_id)
    return Selection(image=image, structure=structure)


# ---------------------------
# CLI
# ---------------------------
def main():
    ap = argparse.ArgumentParser(description="Volumetric-thirds intensity thresholds of a structure")
    ap.add_argument("--image", required=True, help="Image volume (.npz with 'image', 'spacing', 'origin')")
    ap.add_argument("--structure", required=True, help="Structure surface mesh (.stl/.obj/.ply)")
    ap.add_argument("--id", dest="structure_id", default=None,
                    help="Structure name shown in the report (default: mesh file name)")
    ap.add_argument("--quiet", action="store_true", help="Only print the report")
    args = ap.parse_args()

    selection = load_selection(args.image, args.structure, args.structure_id)
    run_thirds(selection, sink=print, verbose=not args.quiet)


if __name__ == "__main__":
    main()
