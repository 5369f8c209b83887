"""Area-based walkability estimates used when the live amenities lookup has no data."""

from __future__ import annotations

import os
import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from ..models.comparison import NearbyAmenity, WalkabilityBreakdown, WalkabilityProfile
from ..utils.normalize import SCORE_BOUNDS, round_half_up
from .area_stats import normalize_area_code

JITTER_SALT = os.getenv("WALKABILITY_JITTER_SALT", "walkability")
JITTER_AMPLITUDE = 0.5
BUSY_PLANNING_THRESHOLD = 5

CATEGORIES = ("transport", "shopping", "education", "healthcare", "leisure", "services")

# (share of the deterministic variation, share of the jitter) per category
CATEGORY_FACTORS: Mapping[str, Tuple[float, float]] = MappingProxyType(
    {
        "transport": (0.8, 0.5),
        "shopping": (0.6, 0.3),
        "education": (0.4, 0.2),
        "healthcare": (0.5, 0.3),
        "leisure": (0.7, 0.4),
        "services": (0.5, 0.3),
    }
)


@dataclass(frozen=True)
class WalkabilityTier:
    name: str
    rating: str
    score: float
    breakdown: Tuple[float, float, float, float, float, float]

    def breakdown_dict(self) -> Dict[str, float]:
        return dict(zip(CATEGORIES, self.breakdown))


EXCELLENT = WalkabilityTier("excellent", "Excellent", 8, (9, 8, 7, 8, 8, 8))
GOOD = WalkabilityTier("good", "Good", 7, (7, 7, 6, 7, 6, 7))
AVERAGE = WalkabilityTier("average", "Average", 6, (6, 6, 6, 6, 5, 6))
POOR = WalkabilityTier("poor", "Poor", 4, (4, 4, 4, 4, 3, 4))
UNKNOWN_AREA = WalkabilityTier("average", "Average", 6, (6, 6, 6, 6, 6, 6))

_TIER_AREAS = {
    EXCELLENT: ("D1", "D2", "D4", "D7"),
    GOOD: ("D3", "D6", "D6W", "D8", "D9"),
    AVERAGE: ("D11", "D12", "D13", "D14"),
    POOR: ("D15", "D16", "D17", "D18", "D20", "D22", "D24"),
}

WALKABILITY_TIERS: Mapping[str, WalkabilityTier] = MappingProxyType(
    {area: tier for tier, areas in _TIER_AREAS.items() for area in areas}
)

NEUTRAL_WALKABILITY = WalkabilityProfile(
    score=5,
    rating="Unknown",
    breakdown=WalkabilityBreakdown(**{category: 5 for category in CATEGORIES}),
    nearest_transit=None,
    source="default",
)


class JitterSource(Protocol):
    def __call__(self, key: str) -> float:
        ...


class SeededJitter:
    """Reproducible jitter in ``[-0.5, 0.5]`` derived from a per-property key."""

    def __init__(self, salt: str = JITTER_SALT) -> None:
        self.salt = salt

    def __call__(self, key: str) -> float:
        rng = random.Random(f"{self.salt}:{key}")
        return rng.uniform(-JITTER_AMPLITUDE, JITTER_AMPLITUDE)


class NoJitter:
    def __call__(self, key: str) -> float:
        return 0.0


def area_walkability_tier(area_code: Optional[str]) -> WalkabilityTier:
    key = normalize_area_code(area_code)
    if key is None:
        return UNKNOWN_AREA
    return WALKABILITY_TIERS.get(key, UNKNOWN_AREA)


def location_variation(distance_km: Optional[float], planning_count: int = 0) -> float:
    """Deterministic adjustment from centrality and nearby development activity."""

    variation = 0.0
    if distance_km is not None:
        if distance_km < 2:
            variation += 0.5
        elif distance_km < 5:
            variation += 0.2
        elif distance_km > 10:
            variation -= 0.3
    if planning_count > BUSY_PLANNING_THRESHOLD:
        variation += 0.2
    return variation


def estimate_walkability(
    area_code: Optional[str],
    key: str,
    jitter: JitterSource,
    distance_km: Optional[float] = None,
    planning_count: int = 0,
) -> WalkabilityProfile:
    """Area tier plus property-specific variation, clamped to 1-10.

    ``distance_km`` is ``None`` when the property has no coordinates, in
    which case centrality does not contribute.
    """

    tier = area_walkability_tier(area_code)
    variation = location_variation(distance_km, planning_count)
    noise = jitter(key)

    score = round_half_up(SCORE_BOUNDS.clamp(tier.score + variation + noise), 1)
    breakdown = {}
    for category, base in tier.breakdown_dict().items():
        variation_share, noise_share = CATEGORY_FACTORS[category]
        value = base + variation * variation_share + noise * noise_share
        breakdown[category] = round_half_up(SCORE_BOUNDS.clamp(value), 1)

    return WalkabilityProfile(
        score=score,
        rating=tier.rating,
        breakdown=WalkabilityBreakdown(**breakdown),
        nearest_transit=None,
        source="estimated",
        nearby_amenities=nearby_amenities(tier.score),
    )


# (minimum base score, amenities) per category, highest band first
_AMENITY_BANDS: Mapping[str, Tuple[Tuple[float, Tuple[Tuple[str, str, str], ...]], ...]] = MappingProxyType(
    {
        "transport": (
            (7, (("DART Station", "Train", "0.3km"), ("Luas Stop", "Tram", "0.2km"), ("Bus Routes", "Bus", "0.1km"))),
            (5, (("Bus Stop", "Bus", "0.2km"), ("Bus Routes", "Bus", "0.4km"))),
            (0, (("Bus Stop", "Bus", "0.8km"),)),
        ),
        "shopping": (
            (8, (("City Centre Shopping", "Mall", "0.5km"), ("Local Supermarket", "Grocery", "0.2km"), ("Convenience Store", "Convenience", "0.1km"))),
            (6, (("Local Supermarket", "Grocery", "0.3km"), ("Convenience Store", "Convenience", "0.2km"))),
            (0, (("Local Shop", "Convenience", "0.6km"),)),
        ),
        "education": (
            (7, (("Primary School", "Primary", "0.4km"), ("Secondary School", "Secondary", "0.8km"), ("University", "University", "1.2km"))),
            (5, (("Local Primary School", "Primary", "0.6km"), ("Secondary School", "Secondary", "1.0km"))),
            (0, (("Primary School", "Primary", "1.2km"),)),
        ),
        "healthcare": (
            (8, (("Hospital", "Hospital", "1.0km"), ("Local GP", "Doctor", "0.3km"), ("Pharmacy", "Pharmacy", "0.2km"))),
            (6, (("Local GP", "Doctor", "0.5km"), ("Pharmacy", "Pharmacy", "0.3km"))),
            (0, (("GP Surgery", "Doctor", "1.0km"),)),
        ),
        "leisure": (
            (7, (("Park", "Park", "0.8km"), ("Local Gym", "Fitness", "0.4km"), ("Pub", "Bar", "0.2km"))),
            (5, (("Local Park", "Park", "0.6km"), ("Pub", "Bar", "0.4km"))),
            (0, (("Local Park", "Park", "1.0km"),)),
        ),
        "services": (
            (7, (("Post Office", "Postal", "0.3km"), ("Bank", "Banking", "0.4km"), ("Library", "Library", "0.6km"))),
            (5, (("Post Office", "Postal", "0.5km"), ("Bank", "Banking", "0.8km"))),
            (0, (("Post Box", "Postal", "0.8km"),)),
        ),
    }
)


def nearby_amenities(base_score: float) -> Dict[str, List[NearbyAmenity]]:
    """Typical amenities for an area of the given base score, per category."""

    result: Dict[str, List[NearbyAmenity]] = {}
    for category, bands in _AMENITY_BANDS.items():
        for minimum, amenities in bands:
            if base_score >= minimum:
                result[category] = [NearbyAmenity(name=n, type=t, distance=d) for n, t, d in amenities]
                break
    return result


__all__ = [
    "NEUTRAL_WALKABILITY",
    "WALKABILITY_TIERS",
    "JitterSource",
    "SeededJitter",
    "NoJitter",
    "area_walkability_tier",
    "location_variation",
    "estimate_walkability",
    "nearby_amenities",
]
