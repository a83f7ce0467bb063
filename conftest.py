"""
Root conftest for the sensory-sim test suite.

Sitting at the project root puts the flat top-level packages (core, noise,
engine) on sys.path for pytest. Shared fixtures live here too.
"""

import pytest

from core.schema import ReferenceDataset
from noise.sources import SequenceNoiseSource, ZeroNoiseSource


@pytest.fixture
def zero_noise():
    return ZeroNoiseSource()


@pytest.fixture
def scripted_noise():
    """Factory: scripted_noise([1.0, -0.5], cycle=True) -> SequenceNoiseSource."""
    def _make(values, cycle=False):
        return SequenceNoiseSource(values, cycle=cycle)
    return _make


@pytest.fixture
def two_feature_dataset():
    return ReferenceDataset({
        "T0": {"alpha": 0.5, "beta": 0.4},
        "T1": {"alpha": 0.1, "beta": 0.3},
    })
