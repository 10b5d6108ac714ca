# src/ventthirds/collector.py
from __future__ import annotations

from typing import Iterable, List

import numpy as np

from ventthirds.config import ThirdsConfig
from ventthirds.providers import ImageProvider
from ventthirds.sampler import SliceHits


class ValueCollector:
    """
    Accumulates display values of voxels inside the structure.

    NaN values are dropped and remembered through nan_seen. With
    exclude_non_positive on, a value is kept only if it is > 0 and
    >= minimum_difference; otherwise every non-NaN value is kept.
    Duplicates are kept: each voxel contributes one entry.
    """

    def __init__(self, exclude_non_positive: bool = True, minimum_difference: float = 1.0):
        self.exclude_non_positive = exclude_non_positive
        self.minimum_difference = float(minimum_difference)
        self.nan_seen = False
        self._chunks: List[np.ndarray] = []

    @classmethod
    def from_config(cls, config: ThirdsConfig) -> "ValueCollector":
        return cls(config.exclude_non_positive, config.minimum_difference)

    def add(self, display_values) -> int:
        """Filter and store a batch; returns how many values were kept."""
        v = np.asarray(display_values, dtype=float).ravel()
        nan = np.isnan(v)
        if np.any(nan):
            self.nan_seen = True
            v = v[~nan]
        if self.exclude_non_positive:
            v = v[(v > 0) & (v >= self.minimum_difference)]
        if v.size:
            # stored single precision, like the host's value list
            self._chunks.append(v.astype(np.float32))
        return int(v.size)

    @property
    def values(self) -> np.ndarray:
        if not self._chunks:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(self._chunks)

    def __len__(self) -> int:
        return sum(len(c) for c in self._chunks)


def collect_values(hits: Iterable[SliceHits], image: ImageProvider,
                   config: ThirdsConfig) -> ValueCollector:
    collector = ValueCollector.from_config(config)
    for h in hits:
        collector.add(image.voxel_to_display(h.raw))
    return collector
