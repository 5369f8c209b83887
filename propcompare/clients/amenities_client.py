"""Client for the live amenities/walkability service."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ..models.comparison import TransitStop, WalkabilityBreakdown, WalkabilityProfile
from ..utils.caching import ttl_memoize
from ..utils.coerce import to_float, to_str
from ..utils.logging import get_logger
from .settings import ADAPTER_CACHE_TTL_SECONDS, ADAPTER_TIMEOUT_SECONDS, AMENITIES_API_URL, USER_AGENT

LOGGER = get_logger("clients.amenities")

CATEGORIES = tuple(WalkabilityBreakdown.model_fields)


class AmenitiesClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = ADAPTER_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url or AMENITIES_API_URL
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_walkability(self, latitude: float, longitude: float) -> Optional[WalkabilityProfile]:
        """Live walkability for a coordinate, or ``None`` when the service has nothing usable."""

        try:
            payload = self._get(round(float(latitude), 6), round(float(longitude), 6))
            return parse_walkability(payload)
        except Exception as exc:
            LOGGER.warning("amenities_lookup_failed lat=%s lng=%s error=%s", latitude, longitude, exc)
            return None

    @ttl_memoize("amenities", ADAPTER_CACHE_TTL_SECONDS)
    def _get(self, latitude: float, longitude: float) -> Dict[str, Any]:
        response = self.session.get(
            self.base_url,
            params={"lat": latitude, "lng": longitude},
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Invalid amenities response format")
        return data


def parse_walkability(payload: Dict[str, Any]) -> Optional[WalkabilityProfile]:
    score = to_float(payload.get("score"))
    if score is None:
        return None
    raw_breakdown = payload.get("breakdown")
    if not isinstance(raw_breakdown, dict):
        raw_breakdown = {}
    breakdown = {category: to_float(raw_breakdown.get(category)) or 0.0 for category in CATEGORIES}
    return WalkabilityProfile(
        score=score,
        rating=to_str(payload.get("rating"), "Unknown"),
        breakdown=WalkabilityBreakdown(**breakdown),
        nearest_transit=_parse_transit(payload.get("nearestTransit") or payload.get("nearestDartLuas")),
        source="live",
    )


def _parse_transit(raw: Any) -> Optional[TransitStop]:
    if not isinstance(raw, dict):
        return None
    distance = to_float(raw.get("distance"))
    name = to_str(raw.get("name"))
    if distance is None or not name:
        return None
    return TransitStop(name=name, distance=distance, mode=to_str(raw.get("mode") or raw.get("type"), "transit"))
