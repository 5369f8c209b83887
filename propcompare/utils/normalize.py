"""Numeric helpers shared by the estimators and the ranking engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Bounds:
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


SCORE_BOUNDS = Bounds(1.0, 10.0)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a cash register: halves always go away from zero."""

    factor = 10 ** digits
    if value < 0:
        return -math.floor(-value * factor + 0.5) / factor
    return math.floor(value * factor + 0.5) / factor


def linear_decay(value: float, threshold: float) -> float:
    """1.0 at zero, falling linearly to 0.0 at ``threshold`` and beyond."""

    if threshold <= 0:
        return 0.0
    return max(0.0, 1 - value / threshold)


def inverse_score(value: float, midpoint: float, scale: float = 10.0) -> float:
    """Map a cost onto ``[0, scale]`` where ``midpoint`` scores half of ``scale``."""

    return max(0.0, scale - (value / midpoint) * (scale / 2))


def ratio(value: Optional[float], maximum: float) -> float:
    if value is None or maximum <= 0:
        return 0.0
    return value / maximum


__all__ = ["Bounds", "SCORE_BOUNDS", "round_half_up", "linear_decay", "inverse_score", "ratio"]
