from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from propcompare.clients.map_images import MapImageGenerator
from propcompare.clients.planning_client import empty_planning_summary
from propcompare.models.comparison import PlanningSummary, WalkabilityProfile
from propcompare.services.comparison_service import ComparisonService
from propcompare.services.enrichment_service import EnrichmentService
from propcompare.services.walkability import NoJitter


class FakeAmenities:
    def __init__(self, profile: Optional[WalkabilityProfile] = None, error: Optional[Exception] = None):
        self.profile = profile
        self.error = error
        self.calls: List[tuple] = []

    def fetch_walkability(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return self.profile


class FakePlanning:
    def __init__(self, summary: Optional[PlanningSummary] = None):
        self.summary = summary
        self.calls: List[tuple] = []

    def fetch_summary(self, latitude, longitude, address, area_code=None):
        self.calls.append((latitude, longitude, address, area_code))
        return self.summary or empty_planning_summary()


def make_property(**overrides: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "address": "1 Example Road",
        "askingPrice": 400000,
        "beds": 2,
        "propertyType": "Apartment",
        "kind": "listing",
        "comparisonId": "p1",
    }
    record.update(overrides)
    return {k: v for k, v in record.items() if v is not None}


def make_enrichment_service(amenities=None, planning=None, **kwargs) -> EnrichmentService:
    return EnrichmentService(
        amenities or FakeAmenities(),
        planning or FakePlanning(),
        MapImageGenerator(token=None),
        jitter=NoJitter(),
        **kwargs,
    )


@pytest.fixture
def enrichment_service() -> EnrichmentService:
    return make_enrichment_service()


@pytest.fixture
def comparison_service(enrichment_service) -> ComparisonService:
    return ComparisonService(enrichment_service, today_provider=lambda: date(2026, 3, 1))
