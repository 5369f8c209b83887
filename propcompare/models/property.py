"""Pydantic models for the properties a caller submits for comparison."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PropertyKind = Literal["sold", "listing", "rental"]


class ComparableProperty(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    area_code: Optional[str] = None
    sold_price: Optional[float] = Field(default=None, ge=0)
    asking_price: Optional[float] = Field(default=None, ge=0)
    monthly_rent: Optional[float] = Field(default=None, ge=0)
    price_per_sqm: Optional[float] = Field(default=None, ge=0)
    rent_per_sqm: Optional[float] = Field(default=None, ge=0)
    beds: Optional[int] = Field(default=None, ge=0)
    baths: Optional[int] = Field(default=None, ge=0)
    area_sqm: Optional[float] = Field(default=None, ge=0)
    property_type: Optional[str] = None
    sold_date: Optional[str] = None
    first_seen_date: Optional[str] = None
    kind: PropertyKind
    comparison_id: str

    @model_validator(mode="after")
    def _require_price(self) -> "ComparableProperty":
        if self.sold_price is None and self.asking_price is None and self.monthly_rent is None:
            raise ValueError("one of soldPrice, askingPrice or monthlyRent is required")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def purchase_price(self) -> float:
        """Sold or asking price, ignoring rent; 0 when neither is set."""

        return self.sold_price or self.asking_price or 0.0


