"""Mortgage, rent and yield estimates."""

from __future__ import annotations

import os
from typing import Optional

from ..models.comparison import MortgageEstimate
from ..models.property import ComparableProperty
from ..utils.normalize import round_half_up
from .area_stats import normalize_area_code

DEFAULT_DOWN_PAYMENT = float(os.getenv("ASSUME_DOWN_PAYMENT", "0.2"))
DEFAULT_TERM_YEARS = int(os.getenv("ASSUME_TERM_YEARS", "30"))
DEFAULT_RATE_PCT = float(os.getenv("ASSUME_RATE_PCT", "4.0"))

BASE_RENT = 1500
RENT_PER_BEDROOM = 300
DEFAULT_RENT_BEDS = 2
PREMIUM_RENT_AREAS = {"D4": 1.5}


def calculate_mortgage(
    price: float,
    down_payment_pct: float = DEFAULT_DOWN_PAYMENT,
    years: int = DEFAULT_TERM_YEARS,
    rate_pct: float = DEFAULT_RATE_PCT,
) -> Optional[MortgageEstimate]:
    """Level monthly repayment on ``price`` less the deposit.

    Returns ``None`` for a non-positive price.
    """

    if price is None or price <= 0:
        return None
    principal = price * (1 - down_payment_pct)
    monthly_rate = rate_pct / 1200
    periods = years * 12
    if periods <= 0:
        return None
    if monthly_rate > 0:
        growth = (1 + monthly_rate) ** periods
        monthly = principal * (monthly_rate * growth) / (growth - 1)
    else:
        monthly = principal / periods
    total_interest = monthly * periods - principal
    return MortgageEstimate(
        monthly=int(round_half_up(monthly)),
        down_payment=int(round_half_up(price * down_payment_pct)),
        total_interest=int(round_half_up(total_interest)),
        rate=rate_pct,
        term=years,
    )


def estimate_monthly_rent(prop: ComparableProperty) -> int:
    beds = prop.beds or DEFAULT_RENT_BEDS
    multiplier = PREMIUM_RENT_AREAS.get(normalize_area_code(prop.area_code) or "", 1.0)
    return int(round_half_up((BASE_RENT + beds * RENT_PER_BEDROOM) * multiplier))


def rental_yield(monthly_rent: Optional[float], price: Optional[float]) -> Optional[float]:
    """Gross annual yield as a percentage of price."""

    if not monthly_rent or not price or price <= 0:
        return None
    return float(monthly_rent * 12 / price * 100)


__all__ = ["calculate_mortgage", "estimate_monthly_rent", "rental_yield"]
