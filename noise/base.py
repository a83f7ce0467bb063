"""
Base class for noise sources.
Engines only ever ask for one uniform draw at a time.
"""

from __future__ import annotations


class NoiseSource:
    """Interface for a stream of uniform draws in [-1, 1]."""

    def next_uniform(self) -> float:
        raise NotImplementedError
