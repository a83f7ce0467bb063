"""
Reference dataset: baseline feature importances per timepoint.

The attribution engine compares every perturbed ranking against the
zero-noise ranking of the first (anchor) timepoint of this table.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, Tuple

import pandas as pd

from .errors import InvalidParameterError


class ReferenceDataset(Mapping):
    """
    Immutable ordered mapping: timepoint label -> {feature name -> baseline in [0, 1]}.

    Every timepoint must carry the same feature names. Per-timepoint insertion
    order is kept, since it breaks ties when ranking.
    """

    def __init__(self, table: Mapping[str, Mapping[str, float]]):
        if len(table) == 0:
            raise InvalidParameterError("Reference dataset needs at least one timepoint.")

        frozen: Dict[str, Mapping[str, float]] = {}
        expected = None
        for timepoint, features in table.items():
            row: Dict[str, float] = {}
            for name, value in features.items():
                try:
                    v = float(value)
                except (TypeError, ValueError) as exc:
                    raise InvalidParameterError(
                        f"{timepoint!r}/{name!r}: baseline must be a real number, got {value!r}"
                    ) from exc
                if not (math.isfinite(v) and 0.0 <= v <= 1.0):
                    raise InvalidParameterError(
                        f"{timepoint!r}/{name!r}: baseline must be in [0, 1], got {v}"
                    )
                key = str(name)
                if key in row:
                    raise InvalidParameterError(
                        f"{timepoint!r}: feature name {key!r} appears more than once"
                    )
                row[key] = v

            names = set(row)
            if expected is None:
                expected = names
            elif names != expected:
                missing = sorted(expected - names)
                extra = sorted(names - expected)
                raise InvalidParameterError(
                    f"Timepoint {timepoint!r} feature set differs from anchor: "
                    f"missing={missing} extra={extra}"
                )
            label = str(timepoint)
            if label in frozen:
                raise InvalidParameterError(f"Timepoint label {label!r} appears more than once")
            frozen[label] = MappingProxyType(row)

        self._table = MappingProxyType(frozen)

    def __getitem__(self, timepoint: str) -> Mapping[str, float]:
        return self._table[timepoint]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"ReferenceDataset(timepoints={list(self.timepoints)}, n_features={len(self.feature_names)})"

    @property
    def timepoints(self) -> Tuple[str, ...]:
        return tuple(self._table)

    @property
    def anchor(self) -> str:
        """First timepoint in insertion order; its ranking is the reference."""
        return self.timepoints[0]

    @property
    def feature_names(self) -> Tuple[str, ...]:
        return tuple(self._table[self.anchor])

    def baseline(self, timepoint: str) -> Mapping[str, float]:
        """Baselines for one timepoint; unknown labels raise InvalidParameterError."""
        try:
            return self._table[timepoint]
        except (KeyError, TypeError):
            raise InvalidParameterError(
                f"Unknown timepoint {timepoint!r}; expected one of {list(self.timepoints)}"
            ) from None

    def summary(self) -> pd.DataFrame:
        """Features x timepoints table of baseline values (anchor feature order)."""
        return pd.DataFrame(
            {tp: [self._table[tp][name] for name in self.feature_names] for tp in self.timepoints},
            index=pd.Index(self.feature_names, name="feature"),
        )


# Drivers-of-liking baselines shown on the demo page
DEFAULT_REFERENCE_DATASET = ReferenceDataset({
    "Day 1": {
        "Freshness": 0.24, "Sillage": 0.18, "Longevity": 0.12, "Price": 0.06,
        "Brand": 0.05, "Eco Score": 0.08, "Package": 0.10, "Texture": 0.17,
    },
    "Day 7": {
        "Freshness": 0.18, "Sillage": 0.22, "Longevity": 0.16, "Price": 0.05,
        "Brand": 0.04, "Eco Score": 0.09, "Package": 0.08, "Texture": 0.18,
    },
    "Day 14": {
        "Freshness": 0.15, "Sillage": 0.25, "Longevity": 0.19, "Price": 0.04,
        "Brand": 0.03, "Eco Score": 0.10, "Package": 0.07, "Texture": 0.17,
    },
})
