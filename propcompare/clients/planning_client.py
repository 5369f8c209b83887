"""Client for the planning-applications matching service."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

from ..models.comparison import PlanningApplicationSummary, PlanningSummary
from ..utils.caching import ttl_memoize
from ..utils.coerce import to_float, to_str
from ..utils.logging import get_logger, kv
from .settings import ADAPTER_CACHE_TTL_SECONDS, ADAPTER_TIMEOUT_SECONDS, PLANNING_API_URL, USER_AGENT

LOGGER = get_logger("clients.planning")

NEARBY_RADIUS_M = 150
LOW_CONFIDENCE_RADIUS_M = int(os.getenv("LOW_CONFIDENCE_RADIUS_M", "75"))
DESCRIPTION_LIMIT = 80

BUCKETS = (("highConfidence", "high"), ("mediumConfidence", "medium"), ("lowConfidence", "low"))
CONFIDENCE_LEVELS = ("high", "medium", "low")


class PlanningClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = ADAPTER_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url or PLANNING_API_URL
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_summary(
        self,
        latitude: float,
        longitude: float,
        address: str,
        area_code: Optional[str] = None,
    ) -> PlanningSummary:
        """Planning activity around a property; an all-zero summary if the lookup fails."""

        try:
            payload = self._get(round(float(latitude), 6), round(float(longitude), 6), address, area_code)
            return summarize_planning(payload)
        except Exception as exc:
            LOGGER.warning("planning_lookup_failed %s", kv(address=address, error=exc))
            return empty_planning_summary()

    @ttl_memoize("planning", ADAPTER_CACHE_TTL_SECONDS)
    def _get(self, latitude: float, longitude: float, address: str, area_code: Optional[str]) -> Dict[str, Any]:
        params = {
            "lat": latitude,
            "lng": longitude,
            "address": address,
            "expandedSearch": "true",
        }
        if area_code:
            params["dublinPostcode"] = area_code
        response = self.session.get(
            self.base_url,
            params=params,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Invalid planning response format")
        return data


def empty_planning_summary() -> PlanningSummary:
    return PlanningSummary(total_applications=0, nearby_count=0, radius=NEARBY_RADIUS_M, top_application=None, applications=[])


def summarize_planning(payload: Dict[str, Any]) -> PlanningSummary:
    """Merge confidence buckets and keep the matches that count as nearby.

    A match without its own distance is assumed to sit at the edge of the
    radius the service searched. High and medium matches count within the
    nearby radius, low-confidence ones only within the tighter
    ``LOW_CONFIDENCE_RADIUS_M``.
    """

    search_radius = to_float(payload.get("searchRadius")) or NEARBY_RADIUS_M
    matches: List[Dict[str, Any]] = []
    for key, confidence in BUCKETS:
        bucket = payload.get(key) or []
        if not isinstance(bucket, list):
            raise ValueError(f"Invalid planning bucket: {key}")
        for item in bucket:
            if not isinstance(item, dict):
                LOGGER.warning("planning_record_skipped %s", kv(bucket=key, record_type=type(item).__name__))
                continue
            own = item.get("confidence")
            matches.append({**item, "confidence": own if own in CONFIDENCE_LEVELS else confidence})

    applications: List[PlanningApplicationSummary] = []
    for match in matches:
        distance = to_float(match.get("distance"))
        if distance is None:
            distance = search_radius
        limit = LOW_CONFIDENCE_RADIUS_M if match["confidence"] == "low" else NEARBY_RADIUS_M
        if distance > limit:
            continue
        applications.append(_simplify(match, distance))

    return PlanningSummary(
        total_applications=len(matches),
        nearby_count=len(applications),
        radius=NEARBY_RADIUS_M,
        top_application=applications[0] if applications else None,
        applications=applications,
    )


def _simplify(match: Dict[str, Any], distance: float) -> PlanningApplicationSummary:
    application = match.get("application")
    if not isinstance(application, dict):
        application = {}
    description = to_str(application.get("DevelopmentDescription"))[:DESCRIPTION_LIMIT]
    return PlanningApplicationSummary(
        description=description or "Development application",
        status=to_str(application.get("ApplicationStatus"), "Unknown"),
        distance=int(round(distance)),
        type=to_str(application.get("ApplicationType"), "Unknown"),
        confidence=match["confidence"],
        application_number=to_str(application.get("ApplicationNumber"), "Unknown"),
    )
