import asyncio

from propcompare.clients.map_images import PLACEHOLDER_IMAGE
from propcompare.models.comparison import TransitStop, WalkabilityBreakdown, WalkabilityProfile
from propcompare.models.property import ComparableProperty
from propcompare.services.walkability import NoJitter

from conftest import FakeAmenities, FakePlanning, make_enrichment_service, make_property


def _enrich(service, record, medians=None):
    prop = ComparableProperty.model_validate(record)
    return asyncio.run(service.enrich(prop, medians or {}))


def _live_profile():
    return WalkabilityProfile(
        score=9.1,
        rating="Walker's Paradise",
        breakdown=WalkabilityBreakdown(transport=9, shopping=9, education=8, healthcare=9, leisure=9, services=9),
        nearest_transit=TransitStop(name="Pearse", distance=300, mode="dart"),
        source="live",
    )


def test_property_without_coordinates_skips_lookups():
    amenities = FakeAmenities(profile=_live_profile())
    planning = FakePlanning()
    service = make_enrichment_service(amenities, planning)

    outcome = _enrich(service, make_property(areaCode="D4"))

    assert outcome.ok
    enrichment = outcome.property.enrichment
    assert enrichment.distance_from_center == 0.0
    assert outcome.property.map_image_url == PLACEHOLDER_IMAGE
    assert amenities.calls == [] and planning.calls == []
    assert enrichment.planning is None
    assert enrichment.walkability.source == "estimated"
    assert enrichment.walkability.score == 8.0
    assert enrichment.estimated_rent is None


def test_enrichment_uses_peer_median_and_area_stats():
    outcome = _enrich(
        make_enrichment_service(),
        make_property(areaCode="Dublin 4", askingPrice=500000),
        medians={"2bed_apartment": 400000.0},
    )
    enrichment = outcome.property.enrichment
    assert enrichment.area_median == 650000
    assert enrichment.type_specific_median == 400000
    assert enrichment.property_type_group == "2bed_apartment"
    assert enrichment.market_position == "above"
    assert enrichment.market_position_pct == 25.0
    assert enrichment.overall_market_position == "below"
    assert enrichment.competition_level == "high"
    assert enrichment.days_on_market_area == 12
    assert enrichment.mortgage.down_payment == 100000


def test_missing_peer_group_falls_back_to_area_median():
    outcome = _enrich(make_enrichment_service(), make_property(askingPrice=455000))
    enrichment = outcome.property.enrichment
    assert enrichment.type_specific_median == 455000
    assert enrichment.market_position == "at"


def test_live_walkability_and_rent_with_coordinates():
    amenities = FakeAmenities(profile=_live_profile())
    planning = FakePlanning()
    service = make_enrichment_service(amenities, planning)

    outcome = _enrich(service, make_property(latitude=53.3430, longitude=-6.2490, areaCode="D2", beds=3))

    enrichment = outcome.property.enrichment
    assert enrichment.walkability.source == "live"
    assert enrichment.walkability.nearest_transit.name == "Pearse"
    assert planning.calls == [(53.3430, -6.2490, "1 Example Road", "D2")]
    assert enrichment.planning.nearby_count == 0
    assert enrichment.estimated_rent == 2400.0
    assert enrichment.estimated_yield == 2400 * 12 / 400000 * 100
    assert enrichment.distance_from_center > 0


def test_rental_gets_no_mortgage_or_yield():
    outcome = _enrich(
        make_enrichment_service(),
        make_property(askingPrice=None, monthlyRent=2200, kind="rental", latitude=53.34, longitude=-6.26),
    )
    enrichment = outcome.property.enrichment
    assert enrichment.mortgage is None
    assert enrichment.estimated_rent is None
    assert enrichment.estimated_yield is None


def test_failing_area_lookup_gives_fallback_block():
    def broken_lookup(area_code):
        raise RuntimeError("stats offline")

    service = make_enrichment_service(area_stats_lookup=broken_lookup)
    outcome = _enrich(service, make_property(areaCode="D4", latitude=53.3, longitude=-6.2))

    assert not outcome.ok
    assert outcome.fallback_reason == "RuntimeError"
    enrichment = outcome.property.enrichment
    assert enrichment.fallback
    assert enrichment.area_median == 455000
    assert enrichment.property_type_group == "unknown"
    assert enrichment.market_position == "at"
    assert enrichment.competition_level == "medium"
    assert enrichment.walkability.score == 5
    assert enrichment.walkability.rating == "Unknown"
    assert enrichment.planning.nearby_count == 0
    assert enrichment.mortgage is None
    assert outcome.property.map_image_url == PLACEHOLDER_IMAGE
    assert outcome.property.comparison_id == "p1"


def test_raising_client_is_contained():
    service = make_enrichment_service(amenities=FakeAmenities(error=ConnectionError("down")))
    outcome = _enrich(service, make_property(latitude=53.3, longitude=-6.2))
    assert outcome.fallback_reason == "ConnectionError"
    assert outcome.property.enrichment.fallback


def test_estimated_walkability_is_stable_without_jitter():
    service = make_enrichment_service()
    assert isinstance(service.jitter, NoJitter)
    first = _enrich(service, make_property(areaCode="D8"))
    second = _enrich(service, make_property(areaCode="D8", comparisonId="p2"))
    assert first.property.enrichment.walkability == second.property.enrichment.walkability
