"""Peer-group medians and market-position classification."""

from __future__ import annotations

from typing import Dict, Iterable

import pandas as pd

from ..models.comparison import MarketPosition
from ..models.property import ComparableProperty

RENT_TO_CAPITAL_MULTIPLIER = 240
POSITION_DEAD_BAND_PCT = 2.0

APARTMENT_KEYWORDS = ("apartment", "flat")
HOUSE_KEYWORDS = ("house", "semi", "terrace")


def effective_price(prop: ComparableProperty) -> float:
    """Sold price, else asking price, else capitalised monthly rent; 0 when none apply."""

    if prop.sold_price:
        return float(prop.sold_price)
    if prop.asking_price:
        return float(prop.asking_price)
    if prop.monthly_rent:
        return float(prop.monthly_rent) * RENT_TO_CAPITAL_MULTIPLIER
    return 0.0


def type_bucket(property_type: str | None) -> str:
    text = (property_type or "").lower()
    if any(word in text for word in APARTMENT_KEYWORDS):
        return "apartment"
    if any(word in text for word in HOUSE_KEYWORDS):
        return "house"
    return "other"


def peer_group_key(prop: ComparableProperty) -> str:
    beds = prop.beds or 1
    return f"{beds}bed_{type_bucket(prop.property_type)}"


def peer_group_medians(properties: Iterable[ComparableProperty]) -> Dict[str, float]:
    """Median effective price per peer group, skipping non-positive prices."""

    rows = []
    for prop in properties:
        price = effective_price(prop)
        if price > 0:
            rows.append({"group": peer_group_key(prop), "price": price})
    if not rows:
        return {}
    frame = pd.DataFrame(rows)
    medians = frame.groupby("group")["price"].median()
    return {str(group): float(value) for group, value in medians.items()}


def classify_market_position(price: float, median: float) -> MarketPosition:
    if not median or median <= 0:
        return MarketPosition(position="at", percentage=0.0)
    percentage = (price - median) * 100 / median
    if percentage < -POSITION_DEAD_BAND_PCT:
        position = "below"
    elif percentage > POSITION_DEAD_BAND_PCT:
        position = "above"
    else:
        position = "at"
    return MarketPosition(position=position, percentage=float(percentage))


__all__ = [
    "RENT_TO_CAPITAL_MULTIPLIER",
    "effective_price",
    "type_bucket",
    "peer_group_key",
    "peer_group_medians",
    "classify_market_position",
]
