"""Distance based delivery fee tiers."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional, Sequence

from ...config import settings
from ...models.domain import Coordinate, FeeQuote, Zone
from ..geospatial import distance_km

NO_LOCATION_ZONE = "no location"

DEFAULT_ZONES: tuple[Zone, ...] = (
    Zone(name="Cerca", radius_km=2.0, fee=1500),
    Zone(name="Media", radius_km=5.0, fee=2500),
    Zone(name="Lejos", radius_km=8.0, fee=3500),
    Zone(name="Extrema", radius_km=math.inf, fee=5000),
)

# Neighborhoods the cashier can pick by name when the address was not geocoded.
SECTOR_ZONES: dict[str, tuple[str, int]] = {
    "melihuen": ("Melihuen", 1500),
    "altotepual": ("Alto Tepual", 1500),
    "senderos_tepual": ("Senderos del Tepual", 1500),
    "cardonal_bajo": ("Cardonal Bajo", 2500),
    "lider_cardonal": ("Líder Cardonal", 3000),
    "lagunita_copec": ("Lagunita hasta Copec", 2500),
    "lagunita": ("Lagunita", 3500),
    "bosquemar": ("Bosquemar", 3000),
    "mirasol": ("Mirasol", 3000),
}


def validate_zones(zones: Sequence[Zone]) -> tuple[Zone, ...]:
    """Check the zone table invariants and return it as a tuple."""

    if not zones:
        raise ValueError("zone table must contain at least one zone")
    previous = -math.inf
    for zone in zones:
        if zone.radius_km <= previous:
            raise ValueError(f"zone radii must be strictly increasing (offending zone '{zone.name}')")
        previous = zone.radius_km
    if not math.isinf(zones[-1].radius_km):
        raise ValueError("the last zone must be unbounded")
    return tuple(zones)


def zones_from_config(raw_zones: Iterable[Mapping]) -> tuple[Zone, ...]:
    zones = []
    for raw in raw_zones:
        radius = raw.get("radius_km")
        zones.append(
            Zone(
                name=str(raw["name"]),
                radius_km=math.inf if radius is None else float(radius),
                fee=int(raw["fee"]),
            )
        )
    return validate_zones(zones)


def store_origin() -> Coordinate:
    return Coordinate(latitude=settings.store_latitude, longitude=settings.store_longitude)


def configured_zones() -> tuple[Zone, ...]:
    return zones_from_config(settings.delivery_zones)


def zone_for_distance(distance: float, zones: Sequence[Zone] = DEFAULT_ZONES) -> Zone:
    for zone in zones:
        if distance <= zone.radius_km:
            return zone
    # unreachable with a validated table; NaN distances land here too
    return zones[-1]


def compute_fee(
    origin: Coordinate,
    destination: Optional[Coordinate],
    zones: Sequence[Zone] = DEFAULT_ZONES,
) -> FeeQuote:
    """Price delivery from origin to destination using the first zone that covers the distance."""

    if destination is None:
        return FeeQuote(fee=0, zone_name=NO_LOCATION_ZONE, distance_km=0.0)
    distance = distance_km(origin, destination)
    zone = zone_for_distance(distance, zones)
    return FeeQuote(fee=zone.fee, zone_name=zone.name, distance_km=distance)


def compute_delivery_fee_for(destination: Optional[Coordinate]) -> FeeQuote:
    """Price delivery from the configured store to a customer coordinate."""

    return compute_fee(store_origin(), destination, configured_zones())


def sector_fee(value: str) -> Optional[int]:
    entry = SECTOR_ZONES.get((value or "").strip().lower())
    return entry[1] if entry else None
