# src/ventthirds/thresholds.py
# Order-statistic thresholds splitting a value distribution into volumetric thirds.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ventthirds.config import DEFAULT_CONFIG, ThirdsConfig
from ventthirds.errors import InsufficientData

MIN_DISTINCT_VALUES = 3


@dataclass(frozen=True)
class ThresholdResult:
    minimum: float
    lower_below: float
    lower_above: float
    upper_below: float
    upper_above: float
    maximum: float
    warnings: Tuple[str, ...] = ()

    @property
    def bands(self) -> Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]:
        """(lower, middle, upper) as (low, high) pairs."""
        return ((self.minimum, self.lower_below),
                (self.lower_above, self.upper_below),
                (self.upper_above, self.maximum))


def split_indices(n: int, fraction: float) -> Tuple[int, int]:
    """
    Indices of the order statistics just below and just above n * fraction.

    The two indices always differ: when n * fraction is integral the lower one
    steps back by one.
    """
    pos = n * fraction
    below = int(math.floor(pos))
    above = min(int(math.ceil(pos)), n - 1)
    if below >= above:
        below = above - 1
    return below, above


def round_display(value: float, precision: int) -> float:
    """Round half to even at `precision` decimals; -0.0 is normalised to 0.0."""
    return round(float(value), precision) + 0.0


def _fmt_bound(v: float) -> str:
    return f"{v:g}"


def range_warning(config: ThirdsConfig) -> str:
    return (f"Structure contains intensity values below: {_fmt_bound(config.warn_below)} "
            f"or in excess of: {_fmt_bound(config.warn_above)}. "
            "Please ensure this is a valid ventilation image.")


NAN_WARNING = ("One or more NaN values were detected when running the script. "
               "This may be because Structure has a bounding box that exceeds "
               "dimensions of the image. Please review outputs carefully.")


def compute_thresholds(values, config: ThirdsConfig = DEFAULT_CONFIG,
                       nan_seen: bool = False) -> ThresholdResult:
    """
    Derive the six band boundaries from the collected display values.

    Parameters
    ----------
    values : array-like of float
        Display values of qualifying voxels (duplicates count as volume).
    config : ThirdsConfig
        Split fractions, rounding precision, minimum difference and warning bounds.
    nan_seen : bool
        Whether NaN samples were dropped while collecting; adds a warning.

    Raises
    ------
    InsufficientData
        Fewer than three distinct values.
    """
    config.validate()
    v = np.sort(np.asarray(values, dtype=float).ravel())
    if len(np.unique(v)) < MIN_DISTINCT_VALUES:
        raise InsufficientData()

    n = len(v)
    p = config.precision
    delta = config.minimum_difference

    lo_b, lo_a = split_indices(n, config.lower_fraction)
    hi_b, hi_a = split_indices(n, config.upper_fraction)

    minimum = round_display(v[0], p)
    lower_below = round_display(v[lo_b], p)
    lower_above = round_display(v[lo_a], p)
    upper_below = round_display(v[hi_b], p)
    upper_above = round_display(v[hi_a], p)
    maximum = round_display(v[-1], p)

    # keep adjacent bands from sharing a displayed boundary
    if lower_below == lower_above:
        lower_below = lower_above - delta
    if upper_below == upper_above:
        upper_below = upper_above - delta

    warnings = []
    if v[0] < config.warn_below or v[-1] > config.warn_above:
        warnings.append(range_warning(config))
    if nan_seen:
        warnings.append(NAN_WARNING)

    return ThresholdResult(minimum, lower_below, lower_above,
                           upper_below, upper_above, maximum, tuple(warnings))
