"""Area-level market statistics keyed on postal district."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from ..models.comparison import AreaStats

_DISTRICT_RE = re.compile(r"^(?:d|dublin)[\s\-_]*(\d{1,2}w?)$", re.IGNORECASE)

DEFAULT_AREA_STATS = AreaStats(
    median_price=455000,
    avg_price_per_sqm=3800,
    pct_over_asking=62,
    avg_days_on_market=18,
)

AREA_STATS: Mapping[str, AreaStats] = MappingProxyType(
    {
        # high demand
        "D4": AreaStats(median_price=650000, avg_price_per_sqm=5200, pct_over_asking=85, avg_days_on_market=12),
        # city centre
        "D1": AreaStats(median_price=420000, avg_price_per_sqm=4500, pct_over_asking=45, avg_days_on_market=22),
        # outer suburbs
        "D15": AreaStats(median_price=380000, avg_price_per_sqm=3200, pct_over_asking=35, avg_days_on_market=28),
    }
)


def normalize_area_code(area_code: Optional[str]) -> Optional[str]:
    """Canonical district key: ``"Dublin 6w"``, ``"dublin-6w"`` and ``"d6w"`` all give ``"D6W"``."""

    if area_code is None:
        return None
    text = str(area_code).strip()
    if not text:
        return None
    match = _DISTRICT_RE.match(text)
    if match:
        return f"D{match.group(1).upper()}"
    return text.upper()


def get_area_stats(area_code: Optional[str]) -> AreaStats:
    key = normalize_area_code(area_code)
    if key is None:
        return DEFAULT_AREA_STATS
    return AREA_STATS.get(key, DEFAULT_AREA_STATS)


def competition_level(pct_over_asking: float) -> str:
    if pct_over_asking > 70:
        return "high"
    if pct_over_asking > 40:
        return "medium"
    return "low"


__all__ = ["AREA_STATS", "DEFAULT_AREA_STATS", "normalize_area_code", "get_area_stats", "competition_level"]
