"""Great-circle helpers."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from .normalize import round_half_up

EARTH_RADIUS_KM = 6371.0

# General Post Office, O'Connell Street
CITY_CENTER: Tuple[float, float] = (53.3498, -6.2603)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad = math.radians(float(lat1))
    lon1_rad = math.radians(float(lon1))
    lat2_rad = math.radians(float(lat2))
    lon2_rad = math.radians(float(lon2))
    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_from_center(latitude: Optional[float], longitude: Optional[float]) -> float:
    """Distance to the city centre in km, one decimal.

    Missing coordinates default to the centre itself, giving 0.0.
    """

    lat = latitude if latitude is not None else CITY_CENTER[0]
    lon = longitude if longitude is not None else CITY_CENTER[1]
    return round_half_up(haversine_km(lat, lon, CITY_CENTER[0], CITY_CENTER[1]), 1)


__all__ = ["CITY_CENTER", "haversine_km", "distance_from_center"]
