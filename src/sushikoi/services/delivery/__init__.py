"""Delivery pricing services."""

from .zones import (
    DEFAULT_ZONES,
    NO_LOCATION_ZONE,
    SECTOR_ZONES,
    compute_delivery_fee_for,
    compute_fee,
    configured_zones,
    sector_fee,
    store_origin,
    validate_zones,
)

__all__ = [
    "DEFAULT_ZONES",
    "NO_LOCATION_ZONE",
    "SECTOR_ZONES",
    "compute_delivery_fee_for",
    "compute_fee",
    "configured_zones",
    "sector_fee",
    "store_origin",
    "validate_zones",
]
