"""Per-property enrichment: market position, finance, walkability, planning and location."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..clients.amenities_client import AmenitiesClient
from ..clients.map_images import PLACEHOLDER_IMAGE, MapImageGenerator
from ..clients.planning_client import PlanningClient, empty_planning_summary
from ..models.comparison import AreaStats, EnrichedProperty, Enrichment, PlanningSummary, WalkabilityProfile
from ..models.property import ComparableProperty
from ..utils.geo import distance_from_center
from ..utils.logging import get_logger, kv
from .area_stats import DEFAULT_AREA_STATS, competition_level, get_area_stats
from .finance import calculate_mortgage, estimate_monthly_rent, rental_yield
from .market import classify_market_position, effective_price, peer_group_key
from .walkability import NEUTRAL_WALKABILITY, JitterSource, SeededJitter, estimate_walkability

LOGGER = get_logger("services.enrichment")

AreaStatsLookup = Callable[[Optional[str]], AreaStats]


@dataclass(frozen=True)
class EnrichmentOutcome:
    """An enriched property, plus the reason when the fallback block was used."""

    property: EnrichedProperty
    fallback_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.fallback_reason is None


class EnrichmentService:
    def __init__(
        self,
        amenities_client: AmenitiesClient,
        planning_client: PlanningClient,
        map_images: MapImageGenerator,
        jitter: Optional[JitterSource] = None,
        area_stats_lookup: AreaStatsLookup = get_area_stats,
    ) -> None:
        self.amenities_client = amenities_client
        self.planning_client = planning_client
        self.map_images = map_images
        self.jitter = jitter or SeededJitter()
        self.area_stats_lookup = area_stats_lookup

    async def enrich(self, prop: ComparableProperty, peer_medians: Dict[str, float]) -> EnrichmentOutcome:
        """Enrich one property; never raises.

        Any failure is logged and replaced by the city-average fallback block
        so one bad data source cannot sink the whole comparison.
        """

        try:
            enriched = await self._enrich(prop, peer_medians)
        except Exception as exc:
            LOGGER.error(
                "enrichment_failed %s",
                kv(comparison_id=prop.comparison_id, address=prop.address, error=type(exc).__name__, detail=str(exc)),
            )
            return EnrichmentOutcome(property=fallback_property(prop), fallback_reason=type(exc).__name__)
        return EnrichmentOutcome(property=enriched)

    async def _enrich(self, prop: ComparableProperty, peer_medians: Dict[str, float]) -> EnrichedProperty:
        stats = self.area_stats_lookup(prop.area_code)
        price = effective_price(prop)
        group = peer_group_key(prop)
        type_median = peer_medians.get(group)
        if type_median is None:
            type_median = stats.median_price
        position = classify_market_position(price, type_median)
        overall_position = classify_market_position(price, stats.median_price)

        mortgage = None
        if prop.kind != "rental" and price > 0:
            mortgage = calculate_mortgage(price)

        distance = distance_from_center(prop.latitude, prop.longitude)
        live_walkability, planning = await self._lookups(prop)

        walkability = live_walkability
        if walkability is None:
            walkability = estimate_walkability(
                prop.area_code,
                key=prop.comparison_id or prop.address,
                jitter=self.jitter,
                distance_km=distance if prop.has_coordinates else None,
                planning_count=planning.nearby_count if planning else 0,
            )

        estimated_rent = None
        estimated_yield = None
        if prop.kind != "rental" and prop.has_coordinates:
            estimated_rent = float(estimate_monthly_rent(prop))
            estimated_yield = rental_yield(estimated_rent, price)

        enrichment = Enrichment(
            area_median=stats.median_price,
            type_specific_median=type_median,
            property_type_group=group,
            area_price_per_sqm=stats.avg_price_per_sqm,
            area_over_asking_pct=stats.pct_over_asking,
            market_position=position.position,
            market_position_pct=position.percentage,
            overall_market_position=overall_position.position,
            overall_market_position_pct=overall_position.percentage,
            competition_level=competition_level(stats.pct_over_asking),
            days_on_market_area=stats.avg_days_on_market,
            mortgage=mortgage,
            walkability=walkability,
            planning=planning,
            distance_from_center=distance,
            estimated_rent=estimated_rent,
            estimated_yield=estimated_yield,
        )
        return EnrichedProperty(
            **prop.model_dump(),
            enrichment=enrichment,
            map_image_url=self.map_images.image_for(prop.latitude, prop.longitude),
        )

    async def _lookups(self, prop: ComparableProperty) -> Tuple[Optional[WalkabilityProfile], Optional[PlanningSummary]]:
        """Live amenities and planning lookups, run concurrently; both skipped without coordinates."""

        if not prop.has_coordinates:
            return None, None
        walkability, planning = await asyncio.gather(
            asyncio.to_thread(self.amenities_client.fetch_walkability, prop.latitude, prop.longitude),
            asyncio.to_thread(
                self.planning_client.fetch_summary,
                prop.latitude,
                prop.longitude,
                prop.address,
                prop.area_code,
            ),
        )
        return walkability, planning


def fallback_enrichment() -> Enrichment:
    """City-average values used when a property could not be enriched."""

    return Enrichment(
        area_median=DEFAULT_AREA_STATS.median_price,
        type_specific_median=DEFAULT_AREA_STATS.median_price,
        property_type_group="unknown",
        area_price_per_sqm=DEFAULT_AREA_STATS.avg_price_per_sqm,
        area_over_asking_pct=DEFAULT_AREA_STATS.pct_over_asking,
        market_position="at",
        market_position_pct=0.0,
        overall_market_position="at",
        overall_market_position_pct=0.0,
        competition_level="medium",
        days_on_market_area=DEFAULT_AREA_STATS.avg_days_on_market,
        mortgage=None,
        walkability=NEUTRAL_WALKABILITY.model_copy(deep=True),
        planning=empty_planning_summary(),
        distance_from_center=0.0,
        estimated_rent=None,
        estimated_yield=None,
        fallback=True,
    )


def fallback_property(prop: ComparableProperty) -> EnrichedProperty:
    return EnrichedProperty(**prop.model_dump(), enrichment=fallback_enrichment(), map_image_url=PLACEHOLDER_IMAGE)
