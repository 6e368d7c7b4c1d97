"""Domain models shared by the pricing and kitchen estimators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Zone:
    """Delivery fee tier keyed by the maximum distance from the store."""

    name: str
    radius_km: float
    fee: int


@dataclass(frozen=True, slots=True)
class FeeQuote:
    fee: int
    zone_name: str
    distance_km: float


class Station(str, Enum):
    COLD = "cold"
    HOT = "hot"


@dataclass(frozen=True, slots=True)
class CartLine:
    """Read-only view of one cart line as seen by the kitchen."""

    item_id: int
    name: Optional[str] = None
    cooking_time_minutes: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ShiftCapacity:
    """Number of parallel stations of each type staffed during a shift."""

    cold: int
    hot: int


@dataclass(frozen=True, slots=True)
class StationLoad:
    """Outstanding minutes of work per station."""

    cold: int = 0
    hot: int = 0

    def __add__(self, other: StationLoad) -> StationLoad:
        return StationLoad(cold=self.cold + other.cold, hot=self.hot + other.hot)

    def for_station(self, station: Station) -> int:
        return self.cold if station is Station.COLD else self.hot
