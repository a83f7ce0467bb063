"""
Simulation engines — decay projection and attribution stability.

project() and attribute() build a default engine and run it once, for callers
that re-invoke on every parameter change and hold no engine of their own.
"""

from __future__ import annotations

from typing import Optional

from core.schema import DEFAULT_REFERENCE_DATASET, ReferenceDataset
from noise.base import NoiseSource

from .attribution import AttributionResult, AttributionStabilityEngine, ImportanceSample
from .projection import ProjectionEngine, ProjectionResult, SeriesPoint


def project(
    decay_rate: float,
    noise_level: float,
    *,
    noise_source: Optional[NoiseSource] = None,
) -> ProjectionResult:
    return ProjectionEngine(noise_source=noise_source).project(decay_rate, noise_level)


def attribute(
    timepoint: str,
    noise_level: float,
    *,
    dataset: Optional[ReferenceDataset] = None,
    noise_source: Optional[NoiseSource] = None,
) -> AttributionResult:
    engine = AttributionStabilityEngine(
        dataset=dataset if dataset is not None else DEFAULT_REFERENCE_DATASET,
        noise_source=noise_source,
    )
    return engine.attribute(timepoint, noise_level)


__all__ = [
    "ProjectionEngine",
    "ProjectionResult",
    "SeriesPoint",
    "AttributionStabilityEngine",
    "AttributionResult",
    "ImportanceSample",
    "project",
    "attribute",
]
