"""
Engine configuration and widget parameter ranges.

The formula constants of both engines live here as frozen dataclasses so a
caller can build a variant engine without touching engine code. The
ParameterRange constants mirror the slider bounds of the demo page; engines
never clamp to them, they only reject out-of-domain values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidParameterError


@dataclass(frozen=True)
class ProjectionConfig:
    # curve reaches this fraction of its initial value at time_to_threshold
    threshold_fraction: float = 0.1

    # sampled horizon extends past the threshold time by this factor
    horizon_factor: float = 1.2

    # series is thinned to roughly this many points
    target_points: int = 60

    # uncertainty band is +/- this fraction of the (noisy) center value
    band_fraction: float = 0.1

    def __post_init__(self) -> None:
        if not 0.0 < self.threshold_fraction < 1.0:
            raise InvalidParameterError(
                f"threshold_fraction must be in (0, 1), got {self.threshold_fraction}"
            )
        if not self.horizon_factor >= 1.0:
            raise InvalidParameterError(
                f"horizon_factor must be >= 1, got {self.horizon_factor}"
            )
        if self.target_points < 1:
            raise InvalidParameterError(
                f"target_points must be >= 1, got {self.target_points}"
            )
        if not 0.0 <= self.band_fraction < 1.0:
            raise InvalidParameterError(
                f"band_fraction must be in [0, 1), got {self.band_fraction}"
            )


@dataclass(frozen=True)
class AttributionConfig:
    """
    Stability score constants.

    raw = (matches / n_features) * match_weight + base_stability - noise * noise_penalty
    reported = clip(raw, stability_floor, stability_ceiling)

    With the defaults a perfect positional match at zero noise scores exactly 1.0
    and no match at zero noise scores 0.7.
    """

    match_weight: float = 0.3
    base_stability: float = 0.7
    noise_penalty: float = 0.5
    stability_floor: float = 0.5
    stability_ceiling: float = 1.0

    def __post_init__(self) -> None:
        for name in ("match_weight", "noise_penalty"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= 0.0):
                raise InvalidParameterError(f"{name} must be a finite value >= 0, got {value}")
        if self.stability_floor > self.stability_ceiling:
            raise InvalidParameterError(
                f"stability_floor ({self.stability_floor}) exceeds "
                f"stability_ceiling ({self.stability_ceiling})"
            )


@dataclass(frozen=True)
class ParameterRange:
    """Bounds and default of one UI control. `clamp` is for callers that prefer it."""

    minimum: float
    maximum: float
    step: float
    default: float

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise InvalidParameterError(
                f"minimum ({self.minimum}) exceeds maximum ({self.maximum})"
            )
        if not self.minimum <= self.default <= self.maximum:
            raise InvalidParameterError(
                f"default {self.default} outside [{self.minimum}, {self.maximum}]"
            )

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def clamp(self, value: float) -> float:
        if math.isnan(value):
            raise InvalidParameterError("cannot clamp NaN")
        return float(min(max(value, self.minimum), self.maximum))


# Slider bounds from the demo page
DECAY_RATE_RANGE = ParameterRange(minimum=0.005, maximum=0.1, step=0.001, default=0.03)
PROJECTION_NOISE_RANGE = ParameterRange(minimum=0.0, maximum=0.1, step=0.005, default=0.02)
ATTRIBUTION_NOISE_RANGE = ParameterRange(minimum=0.0, maximum=0.08, step=0.005, default=0.0)

DEFAULT_TIMEPOINT = "Day 1"
