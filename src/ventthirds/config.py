# src/ventthirds/config.py
from __future__ import annotations

from dataclasses import dataclass, replace

from ventthirds.errors import InvalidInput


@dataclass(frozen=True)
class ThirdsConfig:
    """Parameters of one thresholding run.

    - lower_fraction / upper_fraction: fractional volume at the lower/middle
      and middle/upper split points
    - minimum_difference: smallest difference between two thresholds that can
      be typed into the contouring tool; also the smallest value kept when
      exclude_non_positive is on
    - precision: decimal places of the reported thresholds
    - warn_below / warn_above: values outside this range raise a warning
      (the image may not be a ventilation map)
    - exclude_non_positive: drop voxels with value <= 0 or below
      minimum_difference before the histogram analysis
    """

    lower_fraction: float = 0.33
    upper_fraction: float = 0.66
    minimum_difference: float = 1.0
    precision: int = 0
    warn_below: float = 0.0
    warn_above: float = 9999.0
    exclude_non_positive: bool = True

    def validate(self) -> "ThirdsConfig":
        if not (0.0 < self.lower_fraction < self.upper_fraction < 1.0):
            raise InvalidInput(
                f"split fractions must satisfy 0 < lower < upper < 1 "
                f"(got {self.lower_fraction}, {self.upper_fraction})")
        if self.precision < 0:
            raise InvalidInput(f"precision must be >= 0 (got {self.precision})")
        if self.minimum_difference <= 0:
            raise InvalidInput(
                f"minimum_difference must be positive (got {self.minimum_difference})")
        return self

    def with_overrides(self, **kwargs) -> "ThirdsConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})


DEFAULT_CONFIG = ThirdsConfig()
