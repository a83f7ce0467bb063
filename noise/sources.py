"""
Concrete noise sources.

UniformNoiseSource is what the engines use by default: each draw comes from
numpy's Generator, unseeded unless a seed is given, so repeated calls with
identical inputs differ. ZeroNoiseSource and SequenceNoiseSource make the
noisy code paths reproducible.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from core.errors import InvalidParameterError

from .base import NoiseSource


class UniformNoiseSource(NoiseSource):
    """
    Uniform draws on [-1, 1) from numpy's default Generator.

    Usage:
        source = UniformNoiseSource(seed=7)
        source.next_uniform()  # -> e.g. 0.2499...
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def next_uniform(self) -> float:
        return float(self.rng.uniform(-1.0, 1.0))


class ZeroNoiseSource(NoiseSource):
    """Always 0.0: noisy code paths then reproduce the noise-free output."""

    def next_uniform(self) -> float:
        return 0.0


class SequenceNoiseSource(NoiseSource):
    """
    Replays a fixed list of draws, in order.

    With cycle=True the list wraps around; otherwise running past the end
    raises InvalidParameterError.
    """

    def __init__(self, values: Iterable[float], *, cycle: bool = False):
        vals = [float(v) for v in values]
        bad = [v for v in vals if not -1.0 <= v <= 1.0]
        if bad:
            raise InvalidParameterError(f"Noise draws must lie in [-1, 1], got {bad}")
        if cycle and not vals:
            raise InvalidParameterError("A cycling sequence needs at least one value.")
        self.values = tuple(vals)
        self.cycle = cycle
        self._pos = 0

    @property
    def consumed(self) -> int:
        return self._pos

    def next_uniform(self) -> float:
        if self._pos >= len(self.values):
            if not self.cycle:
                raise InvalidParameterError(
                    f"Noise sequence exhausted after {len(self.values)} draws."
                )
        value = self.values[self._pos % len(self.values)]
        self._pos += 1
        return value
