"""Delivery fee, kitchen ETA and address lookup quotes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...models.domain import Coordinate
from ...schemas.quotes import (
    DeliveryFeeRequest,
    EtaRequest,
    EtaResponse,
    FeeQuoteModel,
    GeocodeRequest,
    GeocodeResponse,
)
from ...services.delivery import compute_delivery_fee_for
from ...services.geocoding import NominatimClient
from ...services.orders import OrderBook
from ..dependencies import get_geocoder, get_order_book

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/delivery-fee", response_model=FeeQuoteModel, status_code=status.HTTP_200_OK)
def quote_delivery_fee(payload: DeliveryFeeRequest) -> FeeQuoteModel:
    destination = None
    if payload.latitude is not None and payload.longitude is not None:
        destination = Coordinate(latitude=payload.latitude, longitude=payload.longitude)
    quote = compute_delivery_fee_for(destination)
    return FeeQuoteModel(fee=quote.fee, zone_name=quote.zone_name, distance_km=round(quote.distance_km, 3))


@router.post("/eta", response_model=EtaResponse, status_code=status.HTTP_200_OK)
def quote_eta(payload: EtaRequest, book: OrderBook = Depends(get_order_book)) -> EtaResponse:
    queue = book.kitchen_queue()
    return EtaResponse(minutes=book.quote_eta(payload.cart), active_orders=len(queue))


@router.post("/geocode", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode_address(payload: GeocodeRequest, geocoder: NominatimClient = Depends(get_geocoder)) -> GeocodeResponse:
    """Resolve an address and price delivery to it in one call."""
    try:
        result = geocoder.geocode(payload.street, payload.number, payload.sector, payload.city)
    except ConnectionError as exc:
        logger.error(f"Geocoding failed for '{payload.street}': {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found.")
    quote = compute_delivery_fee_for(result.to_coordinate())
    return GeocodeResponse(
        lat=result.latitude,
        lng=result.longitude,
        precision=result.precision,
        matched_number=result.matched_number,
        delivery=FeeQuoteModel(fee=quote.fee, zone_name=quote.zone_name, distance_km=round(quote.distance_km, 3)),
    )
