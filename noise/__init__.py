"""
Noise package — uniform draws in [-1, 1] that perturb engine outputs.

  1. base.py     — NoiseSource interface (single next_uniform() operation)
  2. sources.py  — numpy-backed uniform source plus deterministic sources for tests
"""

from .base import NoiseSource
from .sources import SequenceNoiseSource, UniformNoiseSource, ZeroNoiseSource

__all__ = [
    "NoiseSource",
    "UniformNoiseSource",
    "ZeroNoiseSource",
    "SequenceNoiseSource",
]
