"""Batch validation, concurrent enrichment and insight ranking for one comparison."""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..clients.amenities_client import AmenitiesClient
from ..clients.map_images import MapImageGenerator
from ..clients.planning_client import PlanningClient
from ..models.comparison import ComparisonResponse
from ..models.property import ComparableProperty
from ..utils.logging import get_logger, kv
from .enrichment_service import EnrichmentService
from .insights import build_insights
from .market import peer_group_medians

LOGGER = get_logger("services.comparison")

MAX_BATCH_SIZE = 5


class ComparisonRequestError(Exception):
    """The submitted batch is unusable; maps to a 400 response."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


def validate_batch(payload: Any) -> List[ComparableProperty]:
    """Parse the request body into properties, enforcing the batch limits."""

    raw = payload.get("properties") if isinstance(payload, dict) else None
    if not isinstance(raw, list) or not raw:
        raise ComparisonRequestError("Properties array required")
    if len(raw) > MAX_BATCH_SIZE:
        raise ComparisonRequestError(f"Maximum {MAX_BATCH_SIZE} properties allowed")

    properties: List[ComparableProperty] = []
    for index, item in enumerate(raw):
        try:
            properties.append(ComparableProperty.model_validate(item))
        except ValidationError as exc:
            details = exc.errors(include_url=False, include_context=False, include_input=False)
            raise ComparisonRequestError(f"Invalid property at index {index}", details=details) from exc
    return properties


class ComparisonService:
    def __init__(
        self,
        enrichment_service: EnrichmentService,
        today_provider: Callable[[], date] = date.today,
    ) -> None:
        self.enrichment_service = enrichment_service
        self.today_provider = today_provider

    async def compare(self, payload: Any) -> ComparisonResponse:
        properties = validate_batch(payload)
        medians = peer_group_medians(properties)

        outcomes = await asyncio.gather(
            *(self.enrichment_service.enrich(prop, medians) for prop in properties)
        )
        enriched = [outcome.property for outcome in outcomes]
        insights = build_insights(enriched, today=self.today_provider())

        fallbacks = [outcome.fallback_reason for outcome in outcomes if not outcome.ok]
        LOGGER.info(
            "comparison_complete %s",
            kv(properties=len(enriched), peer_groups=len(medians), fallbacks=len(fallbacks), reasons=",".join(fallbacks) or "-"),
        )
        return ComparisonResponse(properties=enriched, insights=insights)


_SERVICE_SINGLETON: Optional[ComparisonService] = None


def get_default_service() -> ComparisonService:
    global _SERVICE_SINGLETON
    if _SERVICE_SINGLETON is None:
        enrichment = EnrichmentService(AmenitiesClient(), PlanningClient(), MapImageGenerator())
        _SERVICE_SINGLETON = ComparisonService(enrichment)
    return _SERVICE_SINGLETON
