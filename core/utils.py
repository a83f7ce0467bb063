from __future__ import annotations

import math
from typing import Iterable, List, Tuple

import numpy as np

from .errors import InvalidParameterError


def _as_finite(name: str, value) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}") from exc
    if not math.isfinite(x):
        raise InvalidParameterError(f"{name} must be finite, got {x}")
    return x


def require_positive(name: str, value) -> float:
    """Return `value` as float, rejecting anything that is not a finite real > 0."""
    x = _as_finite(name, value)
    if x <= 0.0:
        raise InvalidParameterError(f"{name} must be > 0, got {x}")
    return x


def require_non_negative(name: str, value) -> float:
    """Return `value` as float, rejecting anything that is not a finite real >= 0."""
    x = _as_finite(name, value)
    if x < 0.0:
        raise InvalidParameterError(f"{name} must be >= 0, got {x}")
    return x


def clip(value: float, lo: float, hi: float) -> float:
    return float(np.clip(value, lo, hi))


def rank_descending(items: Iterable[Tuple[str, float]]) -> List[str]:
    """
    Names ordered by descending value.
    Ties keep their input order (sorted() is stable under reverse=True).
    """
    return [name for name, _ in sorted(items, key=lambda kv: kv[1], reverse=True)]


def positional_matches(current: List[str], reference: List[str]) -> int:
    """Count of positions i where current[i] == reference[i]."""
    return sum(1 for a, b in zip(current, reference) if a == b)
