"""
Decay-curve projection — exponential decay with relative noise and a ±band.

For a decay rate k the ideal curve is f(t) = exp(-k t). The threshold time is
where f falls to threshold_fraction of its start value:

    exp(-k t) = 0.1   =>   t = ln(10) / k

The series is sampled on integer t from 0 to ceil(1.2 * threshold time), thinned
to roughly 60 points, so the chart shows the curve flattening past the target.

Noise is multiplicative (scaled by the ideal value at t), and the band is a
fixed ±10% around the *noisy* center. That band is a display device, not a
confidence interval.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from core.config import ProjectionConfig
from core.errors import InvalidParameterError
from core.utils import clip, require_non_negative, require_positive
from noise.base import NoiseSource
from noise.sources import UniformNoiseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesPoint:
    t: float
    y: float
    y_lo: float
    y_hi: float


@dataclass(frozen=True)
class ProjectionResult:
    """
    Output of one projection: the sampled series plus the threshold time.

    horizon and step describe the sampling grid (t = 0, step, 2*step, ... <= horizon).
    """
    series: Tuple[SeriesPoint, ...]
    time_to_threshold: float
    horizon: int
    step: int

    @property
    def n_points(self) -> int:
        return len(self.series)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "t": [p.t for p in self.series],
            "y": [p.y for p in self.series],
            "y_lo": [p.y_lo for p in self.series],
            "y_hi": [p.y_hi for p in self.series],
        })


class ProjectionEngine:
    """
    Stateless projection engine; only the injected noise source carries state.

    Usage:
        engine = ProjectionEngine()
        result = engine.project(decay_rate=0.03, noise_level=0.02)
        result.time_to_threshold   # 76.75...
        result.to_dataframe()      # t, y, y_lo, y_hi
    """

    def __init__(
        self,
        config: ProjectionConfig = ProjectionConfig(),
        noise_source: Optional[NoiseSource] = None,
    ):
        self.config = config
        self.noise_source = noise_source if noise_source is not None else UniformNoiseSource()

    def time_to_threshold(self, decay_rate: float) -> float:
        """Closed-form time for exp(-k t) to reach threshold_fraction."""
        k = require_positive("decay_rate", decay_rate)
        t = math.log(1.0 / self.config.threshold_fraction) / k
        if not math.isfinite(t):
            raise InvalidParameterError(f"decay_rate {k} too small: threshold time overflows")
        return t

    def sampling_grid(self, time_to_threshold: float) -> Tuple[int, int]:
        """(horizon, step) for a given threshold time."""
        span = time_to_threshold * self.config.horizon_factor
        if not math.isfinite(span):
            raise InvalidParameterError(
                f"decay rate too small: sampling horizon {span} is not finite"
            )
        horizon = math.ceil(span)
        step = max(1, horizon // self.config.target_points)
        return horizon, step

    def project(self, decay_rate: float, noise_level: float) -> ProjectionResult:
        k = require_positive("decay_rate", decay_rate)
        noise = require_non_negative("noise_level", noise_level)
        cfg = self.config

        t_threshold = self.time_to_threshold(k)
        horizon, step = self.sampling_grid(t_threshold)

        points = []
        # Integer grid, horizon inclusive
        for t in range(0, horizon + 1, step):
            f = math.exp(-k * t)
            eps = self.noise_source.next_uniform() * noise * f if noise > 0 else 0.0
            # Upper clamp keeps y <= y_hi when positive noise lifts y above 1
            y = clip(f + eps, 0.0, 1.0)
            points.append(SeriesPoint(
                t=float(t),
                y=y,
                y_lo=max(0.0, y * (1.0 - cfg.band_fraction)),
                y_hi=min(1.0, y * (1.0 + cfg.band_fraction)),
            ))

        logger.debug(
            "projection k=%.4f noise=%.4f t90=%.2f horizon=%d step=%d points=%d",
            k, noise, t_threshold, horizon, step, len(points),
        )
        return ProjectionResult(
            series=tuple(points),
            time_to_threshold=t_threshold,
            horizon=horizon,
            step=step,
        )
