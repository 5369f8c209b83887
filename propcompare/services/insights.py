"""Comparative insights across an enriched batch.

Each axis is a pure scoring function over one property. ``pick_best`` scans
the scores left to right with strict comparisons, so the first property wins
a tie on every axis.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..models.comparison import EnrichedProperty, InsightPick, InsightSet, Notice
from ..utils.normalize import inverse_score, linear_decay, ratio
from .finance import estimate_monthly_rent, rental_yield

POSITION_BONUS = {"below": 2.0, "at": 1.0, "above": 0.0}

INVESTMENT_TRANSIT_DEFAULT_M = 1000
COMMUTER_TRANSIT_DEFAULT_M = 2000
SALE_PRICE_PER_SQM_CEILING = 15000
SALE_DAYS_CEILING = 90
# listings first seen today or later rank as if they had been up a month
FRESH_LISTING_DAYS = 30

OVERPRICED_PCT = 15
BUSY_PLANNING_COUNT = 2
HOT_MARKET_PREMIUM_PCT = 5
NEUTRAL_WALK_SCORE = 5


def pick_best(
    scores: Iterable[Optional[float]],
    threshold: float,
    lower_is_better: bool = False,
) -> Optional[Tuple[int, float]]:
    """Index and score of the first strictly-best score beyond ``threshold``.

    ``None`` scores are skipped. Returns ``None`` when nothing beats the
    threshold.
    """

    best_index = -1
    best_score = threshold
    for index, score in enumerate(scores):
        if score is None:
            continue
        better = score < best_score if lower_is_better else score > best_score
        if better:
            best_index, best_score = index, score
    if best_index < 0:
        return None
    return best_index, best_score


# ---------------------------------------------------------------------------
# Per-property inputs
# ---------------------------------------------------------------------------


def price_per_sqm(prop: EnrichedProperty) -> Optional[float]:
    if prop.price_per_sqm:
        return prop.price_per_sqm
    if prop.purchase_price > 0 and prop.area_sqm:
        return prop.purchase_price / prop.area_sqm
    return None


def transit_distance(prop: EnrichedProperty) -> Optional[float]:
    transit = prop.enrichment.walkability.nearest_transit
    return transit.distance if transit else None


def days_on_market(prop: EnrichedProperty, today: date) -> Optional[int]:
    """Days since the property was first seen; ``None`` for rentals or unknown dates."""

    if prop.kind == "rental" or not prop.first_seen_date:
        return None
    seen = pd.to_datetime(prop.first_seen_date, errors="coerce")
    if pd.isna(seen):
        return None
    if seen.tzinfo is not None:
        seen = seen.tz_convert(None)
    days = (pd.Timestamp(today) - seen.normalize()).days
    return max(days, 0)


# ---------------------------------------------------------------------------
# Axis scores
# ---------------------------------------------------------------------------


def overall_score(prop: EnrichedProperty) -> float:
    enrichment = prop.enrichment
    score = 0.0

    ppsqm = price_per_sqm(prop)
    if ppsqm and ppsqm > 0:
        score += inverse_score(ppsqm, midpoint=10000) * 0.3

    score += ratio(enrichment.walkability.score, 10) * 0.25
    score += POSITION_BONUS[enrichment.market_position]

    if enrichment.mortgage and enrichment.mortgage.monthly:
        score += inverse_score(enrichment.mortgage.monthly, midpoint=3000) * 0.2

    price = prop.purchase_price
    if price > 0:
        beds = prop.beds or 1
        score += min(beds / (price / 100000) * 2, 2)
    return score


def investment_score(prop: EnrichedProperty) -> float:
    enrichment = prop.enrichment
    transit = transit_distance(prop) or INVESTMENT_TRANSIT_DEFAULT_M
    score = ratio(enrichment.walkability.score, 10) * 0.4
    score += linear_decay(transit, INVESTMENT_TRANSIT_DEFAULT_M) * 0.3
    if enrichment.market_position == "below":
        score += 0.3
    if enrichment.competition_level == "medium":
        score += 0.2
    return score


def family_score(prop: EnrichedProperty) -> float:
    breakdown = prop.enrichment.walkability.breakdown
    score = min((prop.beds or 0) / 4, 1) * 0.3
    score += ratio(breakdown.education, 10) * 0.3
    score += ratio(breakdown.shopping, 10) * 0.2
    score += ratio(breakdown.healthcare, 10) * 0.2
    return score


def commuter_score(prop: EnrichedProperty) -> float:
    transit = transit_distance(prop) or COMMUTER_TRANSIT_DEFAULT_M
    score = linear_decay(transit, COMMUTER_TRANSIT_DEFAULT_M) * 0.6
    score += ratio(prop.enrichment.walkability.breakdown.transport, 10) * 0.4
    return score


def rental_yield_score(prop: EnrichedProperty) -> Optional[float]:
    if prop.kind not in ("sold", "listing"):
        return None
    price = prop.purchase_price
    if price <= 0:
        return None
    return rental_yield(estimate_monthly_rent(prop), price)


def sale_speed_score(prop: EnrichedProperty, today: date) -> float:
    enrichment = prop.enrichment
    score = 0.0
    ppsqm = price_per_sqm(prop)
    if ppsqm and ppsqm > 0:
        score += linear_decay(ppsqm, SALE_PRICE_PER_SQM_CEILING) * 0.3
    if enrichment.market_position == "below":
        score += 0.3
    if enrichment.competition_level == "high":
        score += 0.2
    days = days_on_market(prop, today)
    if days is not None:
        if days <= 0:
            days = FRESH_LISTING_DAYS
        score += linear_decay(days, SALE_DAYS_CEILING) * 0.2
    return score


def value_metric(prop: EnrichedProperty) -> Optional[float]:
    return price_per_sqm(prop) or prop.rent_per_sqm or None


def mortgage_metric(prop: EnrichedProperty) -> Optional[float]:
    mortgage = prop.enrichment.mortgage
    return mortgage.monthly if mortgage and mortgage.monthly else None


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def build_insights(properties: Sequence[EnrichedProperty], today: Optional[date] = None) -> InsightSet:
    today = today or date.today()
    picks = {}

    found = pick_best((overall_score(p) for p in properties), threshold=-1)
    if found:
        picks["best_overall"] = _pick(found, "Best overall value considering price, location, and affordability")

    found = pick_best((investment_score(p) for p in properties), threshold=-1)
    if found:
        picks["best_investment"] = _pick(found, "Strongest investment potential based on location quality and market timing")

    found = pick_best((family_score(p) for p in properties), threshold=-1)
    if found:
        picks["best_family"] = _pick(found, "Most family-friendly with good education and amenity access")

    found = pick_best((commuter_score(p) for p in properties), threshold=-1)
    if found:
        transit = properties[found[0]].enrichment.walkability.nearest_transit
        picks["best_commuter"] = _pick(found, f"Best for commuters - closest to {transit.name if transit else 'public transport'}")

    found = pick_best((rental_yield_score(p) for p in properties), threshold=0)
    if found:
        picks["best_rental_yield"] = _pick(found, f"Highest estimated rental yield: {found[1]:.1f}% annually")

    found = pick_best((sale_speed_score(p, today) for p in properties), threshold=-1)
    if found:
        picks["fastest_sale"] = _pick(found, "Most likely to sell quickly based on price positioning and market conditions")

    found = pick_best((value_metric(p) for p in properties), threshold=math.inf, lower_is_better=True)
    if found:
        picks["best_value"] = _pick(found, f"Lowest price per m² at €{found[1]:,.0f}/m²")

    found = pick_best((p.enrichment.walkability.score for p in properties), threshold=0)
    if found:
        picks["best_walkability"] = _pick(found, f"Highest walkability score: {found[1]:g}/10")

    found = pick_best((mortgage_metric(p) for p in properties), threshold=math.inf, lower_is_better=True)
    if found:
        picks["lowest_mortgage"] = _pick(found, f"Lowest monthly mortgage at €{found[1]:,.0f}")

    found = pick_best((transit_distance(p) for p in properties), threshold=math.inf, lower_is_better=True)
    if found:
        transit = properties[found[0]].enrichment.walkability.nearest_transit
        picks["best_transit"] = _pick(found, f"Closest to {transit.name} ({found[1]:g}m)")

    return InsightSet(
        **picks,
        warnings=collect_warnings(properties),
        highlights=collect_highlights(properties),
        market_insights=market_summary(properties),
    )


def collect_warnings(properties: Sequence[EnrichedProperty]) -> List[Notice]:
    warnings: List[Notice] = []
    for index, prop in enumerate(properties):
        enrichment = prop.enrichment
        pct = enrichment.market_position_pct
        if pct > OVERPRICED_PCT:
            group = enrichment.property_type_group.replace("_", " ", 1) or "similar properties"
            warnings.append(Notice(index=index, message=f"{abs(pct):.1f}% above {group} median - may be overpriced"))
        if enrichment.planning and enrichment.planning.nearby_count > BUSY_PLANNING_COUNT:
            warnings.append(
                Notice(
                    index=index,
                    message=f"{enrichment.planning.nearby_count} planning applications nearby - potential disruption",
                )
            )
        if enrichment.competition_level == "high" and pct > HOT_MARKET_PREMIUM_PCT:
            warnings.append(Notice(index=index, message="High competition area + above market price - challenging sale conditions"))
    return warnings


def collect_highlights(properties: Sequence[EnrichedProperty]) -> List[Notice]:
    highlights: List[Notice] = []
    for index, prop in enumerate(properties):
        enrichment = prop.enrichment
        walk = enrichment.walkability
        below = enrichment.market_position == "below"
        if below and walk.score >= 7:
            highlights.append(Notice(index=index, message="Below market value with good walkability - strong buying opportunity"))
        if walk.score >= 9:
            highlights.append(Notice(index=index, message="Exceptional walkability - access to virtually all amenities on foot"))
        if below and enrichment.competition_level == "medium":
            highlights.append(Notice(index=index, message="Sweet spot: below market value in moderately competitive area"))
        if (prop.beds or 0) >= 3 and walk.breakdown.education >= 7:
            highlights.append(Notice(index=index, message="Ideal family home - spacious with excellent school access"))
    return highlights


def market_summary(properties: Sequence[EnrichedProperty]) -> List[str]:
    if not properties:
        return []
    avg_price = float(np.mean([p.purchase_price for p in properties]))
    walk_scores = [
        p.enrichment.walkability.score if p.enrichment.walkability.score is not None else NEUTRAL_WALK_SCORE
        for p in properties
    ]
    avg_walkability = float(np.mean(walk_scores))
    high_competition = sum(1 for p in properties if p.enrichment.competition_level == "high")
    below_market = sum(1 for p in properties if p.enrichment.market_position == "below")
    return [
        f"Average property price: €{avg_price:,.0f}",
        f"Average walkability score: {avg_walkability:.1f}/10",
        f"{high_competition} properties in high-competition areas",
        f"{below_market} properties priced below type-specific medians",
        "Market positions calculated against similar property types (same bedroom count & style)",
    ]


def _pick(found: Tuple[int, float], reason: str) -> InsightPick:
    index, score = found
    return InsightPick(index=index, reason=reason, score=float(score))
