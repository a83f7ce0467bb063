"""
Core package — configuration, reference data, errors, and shared helpers.
No engine logic lives here.
"""

from .errors import InvalidParameterError
from .config import (
    ATTRIBUTION_NOISE_RANGE,
    DECAY_RATE_RANGE,
    DEFAULT_TIMEPOINT,
    PROJECTION_NOISE_RANGE,
    AttributionConfig,
    ParameterRange,
    ProjectionConfig,
)
from .schema import DEFAULT_REFERENCE_DATASET, ReferenceDataset
from .utils import require_non_negative, require_positive

__all__ = [
    "InvalidParameterError",
    "ProjectionConfig",
    "AttributionConfig",
    "ParameterRange",
    "DECAY_RATE_RANGE",
    "PROJECTION_NOISE_RANGE",
    "ATTRIBUTION_NOISE_RANGE",
    "DEFAULT_TIMEPOINT",
    "ReferenceDataset",
    "DEFAULT_REFERENCE_DATASET",
    "require_positive",
    "require_non_negative",
]
