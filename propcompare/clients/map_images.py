"""Static map images for the comparison cards."""

from __future__ import annotations

from typing import Optional

from ..utils.logging import get_logger
from .settings import MAPBOX_TOKEN

LOGGER = get_logger("clients.map_images")

MAPBOX_STATIC_URL = "https://api.mapbox.com/styles/v1/mapbox/{style}/static/{marker}/{lng},{lat},{zoom}/{width}x{height}@2x"

PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;base64,"
    "PHN2ZyB3aWR0aD0iNDAwIiBoZWlnaHQ9IjMwMCIgdmlld0JveD0iMCAwIDQwMCAzMDAiIGZpbGw9Im5vbmUiIHhtbG5zPSJodHRwOi8v"
    "d3d3LnczLm9yZy8yMDAwL3N2ZyI+CjxyZWN0IHdpZHRoPSI0MDAiIGhlaWdodD0iMzAwIiBmaWxsPSIjZjNmNGY2Ii8+Cjx0ZXh0IHg9"
    "IjIwMCIgeT0iMTUwIiB0ZXh0LWFuY2hvcj0ibWlkZGxlIiBmaWxsPSIjOWNhM2FmIiBmb250LWZhbWlseT0iQXJpYWwiIGZvbnQtc2l6"
    "ZT0iMTQiPk5vIG1hcCBhdmFpbGFibGU8L3RleHQ+Cjwvc3ZnPg=="
)


class MapImageGenerator:
    def __init__(
        self,
        token: Optional[str] = MAPBOX_TOKEN,
        style: str = "streets-v12",
        zoom: int = 15,
        width: int = 400,
        height: int = 300,
        marker_color: str = "3b82f6",
    ) -> None:
        self.token = token
        self.style = style
        self.zoom = zoom
        self.width = width
        self.height = height
        self.marker_color = marker_color
        if not token:
            LOGGER.info("Mapbox token not configured; comparison cards will use the placeholder image")

    def image_for(self, latitude: Optional[float], longitude: Optional[float]) -> str:
        if latitude is None or longitude is None or not self.token:
            return PLACEHOLDER_IMAGE
        marker = f"pin-l-home+{self.marker_color}({longitude},{latitude})"
        url = MAPBOX_STATIC_URL.format(
            style=self.style,
            marker=marker,
            lng=longitude,
            lat=latitude,
            zoom=self.zoom,
            width=self.width,
            height=self.height,
        )
        return f"{url}?access_token={self.token}"
