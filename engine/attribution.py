"""
Feature-attribution stability — noisy importance scores and a rank-agreement score.

For the selected timepoint every baseline importance gets additive noise
(not scaled by the baseline, unlike the projection engine):

    value = max(0, base + u * noise),   u ~ U[-1, 1]

The perturbed features are ranked by descending value and compared position
by position with the reference ranking (anchor timepoint, zero noise):

    raw       = (matches / n_features) * 0.3 + 0.7 - noise * 0.5
    stability = clip(raw, 0.5, 1.0)

This is a strict positional match, not a rank correlation. The demo labels it
a "tau proxy"; the literal formula is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from core.config import AttributionConfig
from core.schema import DEFAULT_REFERENCE_DATASET, ReferenceDataset
from core.utils import clip, positional_matches, rank_descending, require_non_negative
from noise.base import NoiseSource
from noise.sources import UniformNoiseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportanceSample:
    name: str
    value: float


@dataclass(frozen=True)
class AttributionResult:
    """
    Output of one attribution evaluation.

    samples are in dataset insertion order; ranked() gives the display order.
    stability is the clamped score, raw_stability the value before clamping.
    """
    timepoint: str
    samples: Tuple[ImportanceSample, ...]
    stability: float
    raw_stability: float
    matches: int
    reference_ranking: Tuple[str, ...]
    current_ranking: Tuple[str, ...]

    @property
    def n_features(self) -> int:
        return len(self.samples)

    def ranked(self) -> Tuple[ImportanceSample, ...]:
        """Samples by descending value, ties in insertion order."""
        return tuple(sorted(self.samples, key=lambda s: s.value, reverse=True))

    def to_dataframe(self) -> pd.DataFrame:
        ref_pos = {name: i + 1 for i, name in enumerate(self.reference_ranking)}
        return pd.DataFrame([
            {
                "rank": i + 1,
                "name": s.name,
                "value": s.value,
                "reference_rank": ref_pos.get(s.name),
            }
            for i, s in enumerate(self.ranked())
        ])


class AttributionStabilityEngine:
    """
    Perturbs one timepoint's importances and scores ranking stability.

    The reference dataset is injected so tests (or other demos) can swap tables.

    Usage:
        engine = AttributionStabilityEngine()
        result = engine.attribute("Day 14", noise_level=0.02)
        result.ranked()      # bar-chart order
        result.stability     # in [0.5, 1.0]
    """

    def __init__(
        self,
        dataset: ReferenceDataset = DEFAULT_REFERENCE_DATASET,
        config: AttributionConfig = AttributionConfig(),
        noise_source: Optional[NoiseSource] = None,
    ):
        self.dataset = dataset
        self.config = config
        self.noise_source = noise_source if noise_source is not None else UniformNoiseSource()

        anchor = dataset.baseline(dataset.anchor)
        self._reference_ranking = tuple(rank_descending(anchor.items()))

    @property
    def reference_ranking(self) -> Tuple[str, ...]:
        return self._reference_ranking

    @property
    def timepoints(self) -> Tuple[str, ...]:
        return self.dataset.timepoints

    def sample(self, timepoint: str, noise_level: float) -> Tuple[ImportanceSample, ...]:
        """One perturbed draw per feature, in dataset order."""
        base = self.dataset.baseline(timepoint)
        noise = require_non_negative("noise_level", noise_level)
        if noise == 0:
            return tuple(ImportanceSample(name=n, value=v) for n, v in base.items())
        return tuple(
            ImportanceSample(name=n, value=max(0.0, v + self.noise_source.next_uniform() * noise))
            for n, v in base.items()
        )

    def stability(self, current_ranking: Tuple[str, ...], noise_level: float) -> Tuple[float, float, int]:
        """(clamped, raw, matches) for a ranking against the reference."""
        cfg = self.config
        noise = require_non_negative("noise_level", noise_level)
        n = len(current_ranking)
        matches = positional_matches(list(current_ranking), list(self._reference_ranking))
        # 0/0 is defined as no agreement
        match_fraction = matches / n if n > 0 else 0.0
        raw = match_fraction * cfg.match_weight + cfg.base_stability - noise * cfg.noise_penalty
        return clip(raw, cfg.stability_floor, cfg.stability_ceiling), raw, matches

    def attribute(self, timepoint: str, noise_level: float) -> AttributionResult:
        noise = require_non_negative("noise_level", noise_level)
        samples = self.sample(timepoint, noise)
        current = tuple(rank_descending((s.name, s.value) for s in samples))
        stability, raw, matches = self.stability(current, noise)

        logger.debug(
            "attribution timepoint=%s noise=%.4f matches=%d/%d raw=%.4f stability=%.4f",
            timepoint, noise, matches, len(samples), raw, stability,
        )
        return AttributionResult(
            timepoint=timepoint,
            samples=samples,
            stability=stability,
            raw_stability=raw,
            matches=matches,
            reference_ranking=self._reference_ranking,
            current_ranking=current,
        )
