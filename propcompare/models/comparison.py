"""Pydantic schemas for enriched properties and comparison insights."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .property import ComparableProperty

Position = Literal["below", "at", "above"]
CompetitionLevel = Literal["low", "medium", "high"]
Confidence = Literal["high", "medium", "low"]


class AreaStats(BaseModel):
    median_price: float
    avg_price_per_sqm: float
    pct_over_asking: float
    avg_days_on_market: int


class MarketPosition(BaseModel):
    position: Position
    percentage: float


class MortgageEstimate(BaseModel):
    monthly: int
    down_payment: int
    total_interest: int
    rate: float
    term: int


class TransitStop(BaseModel):
    name: str
    distance: float
    mode: str


class WalkabilityBreakdown(BaseModel):
    transport: float
    shopping: float
    education: float
    healthcare: float
    leisure: float
    services: float


class NearbyAmenity(BaseModel):
    name: str
    type: str
    distance: str


class WalkabilityProfile(BaseModel):
    score: float
    rating: str
    breakdown: WalkabilityBreakdown
    nearest_transit: Optional[TransitStop] = None
    source: Literal["live", "estimated", "default"] = "estimated"
    nearby_amenities: Optional[Dict[str, List[NearbyAmenity]]] = None


class PlanningApplicationSummary(BaseModel):
    description: str
    status: str
    distance: int
    type: str
    confidence: Confidence
    application_number: str


class PlanningSummary(BaseModel):
    total_applications: int = 0
    nearby_count: int = 0
    radius: int = 150
    top_application: Optional[PlanningApplicationSummary] = None
    applications: List[PlanningApplicationSummary] = Field(default_factory=list)


class Enrichment(BaseModel):
    area_median: float
    type_specific_median: float
    property_type_group: str
    area_price_per_sqm: float
    area_over_asking_pct: float
    market_position: Position
    market_position_pct: float
    overall_market_position: Position
    overall_market_position_pct: float
    competition_level: CompetitionLevel
    days_on_market_area: int
    mortgage: Optional[MortgageEstimate] = None
    walkability: WalkabilityProfile
    planning: Optional[PlanningSummary] = None
    distance_from_center: float
    estimated_rent: Optional[float] = None
    estimated_yield: Optional[float] = None
    fallback: bool = False


class EnrichedProperty(ComparableProperty):
    enrichment: Enrichment
    map_image_url: str


class InsightPick(BaseModel):
    index: int
    reason: str
    score: Optional[float] = None


class Notice(BaseModel):
    index: int
    message: str


class InsightSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    best_overall: Optional[InsightPick] = None
    best_investment: Optional[InsightPick] = None
    best_family: Optional[InsightPick] = None
    best_commuter: Optional[InsightPick] = None
    best_rental_yield: Optional[InsightPick] = None
    fastest_sale: Optional[InsightPick] = None
    best_value: Optional[InsightPick] = None
    best_walkability: Optional[InsightPick] = None
    lowest_mortgage: Optional[InsightPick] = None
    best_transit: Optional[InsightPick] = None
    warnings: List[Notice] = Field(default_factory=list)
    highlights: List[Notice] = Field(default_factory=list)
    market_insights: List[str] = Field(default_factory=list)


class ComparisonResponse(BaseModel):
    properties: List[EnrichedProperty]
    insights: InsightSet
