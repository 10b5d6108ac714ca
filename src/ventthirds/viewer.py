# src/ventthirds/viewer.py
# Optional HTML preview: histogram of the collected values with the three bands shaded.

from __future__ import annotations

import os

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio

from ventthirds.console import ok
from ventthirds.thresholds import ThresholdResult

BAND_COLORS = {"lower": "#3B82F6", "middle": "#22C55E", "upper": "#F59E0B"}


def histogram_figure(values: np.ndarray, result: ThresholdResult, structure_id: str,
                     nbins: int = 100) -> go.Figure:
    fig = go.Figure(data=[go.Histogram(
        x=np.asarray(values, dtype=float), nbinsx=nbins,
        marker_color="#9CA3AF", name="voxels"
    )])
    for name, (low, high) in zip(("lower", "middle", "upper"), result.bands):
        fig.add_vrect(x0=low, x1=high, fillcolor=BAND_COLORS[name], opacity=0.2,
                      line_width=0, annotation_text=f"{name} third",
                      annotation_position="top left")
    fig.update_layout(
        title=f"Display values inside '{structure_id}' (n={len(values)})",
        xaxis=dict(title="Display value"),
        yaxis=dict(title="Voxel count"),
        bargap=0.02,
        margin=dict(l=40, r=10, t=50, b=40),
    )
    return fig


def save_histogram_html(values: np.ndarray, result: ThresholdResult, structure_id: str,
                        html_path: str = "outputs/thirds.html") -> str:
    os.makedirs(os.path.dirname(html_path) or ".", exist_ok=True)
    fig = histogram_figure(values, result, structure_id)
    pio.write_html(fig, html_path, auto_open=False, include_plotlyjs=True, full_html=True)
    ok(f"Histogram saved to {html_path}")
    return html_path
