"""Delivery fee, ETA and geocoding quote schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .orders import CartItemModel


class DeliveryFeeRequest(BaseModel):
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def _both_or_neither(self) -> "DeliveryFeeRequest":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        return self


class FeeQuoteModel(BaseModel):
    fee: int
    zone_name: str
    distance_km: float


class EtaRequest(BaseModel):
    cart: List[CartItemModel] = Field(default_factory=list)


class EtaResponse(BaseModel):
    minutes: int
    active_orders: int


class GeocodeRequest(BaseModel):
    street: str = Field(..., min_length=2)
    number: Optional[str] = None
    sector: Optional[str] = None
    city: Optional[str] = None


class GeocodeResponse(BaseModel):
    lat: float
    lng: float
    precision: str
    matched_number: bool
    delivery: FeeQuoteModel
