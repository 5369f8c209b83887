"""Connection settings shared by the upstream service clients."""

import os

SERVICES_BASE_URL = os.getenv("SERVICES_BASE_URL", "http://localhost:3000").rstrip("/")
AMENITIES_API_URL = os.getenv("AMENITIES_API_URL", f"{SERVICES_BASE_URL}/api/amenities")
PLANNING_API_URL = os.getenv("PLANNING_API_URL", f"{SERVICES_BASE_URL}/api/planning")
MAPBOX_TOKEN = os.getenv("MAPBOX_TOKEN") or os.getenv("NEXT_PUBLIC_MAPBOX_TOKEN")

ADAPTER_TIMEOUT_SECONDS = float(os.getenv("ADAPTER_TIMEOUT_SECONDS", "10"))
ADAPTER_CACHE_TTL_SECONDS = float(os.getenv("ADAPTER_CACHE_TTL_SECONDS", str(24 * 60 * 60)))

USER_AGENT = "propcompare/1.0"
