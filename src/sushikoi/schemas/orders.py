"""Order request/response schemas."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import CartLine, Coordinate


class OrderStatus(str, Enum):
    PENDING = "pending"
    COOKING = "cooking"
    READY = "ready"
    ON_ROUTE = "on_route"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


PaymentMethod = Literal["efectivo", "debito", "credito", "transferencia", "mp"]
PaymentStatus = Literal["paid", "pending", "unpaid", "due", "refunded"]
ServiceType = Literal["delivery", "local"]
GeocodePrecision = Literal["exact", "road", "fallback", "approx", "none"]


class CoordinatesModel(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> Coordinate:
        return Coordinate(latitude=self.lat, longitude=self.lng)


class CartItemModel(BaseModel):
    id: int = Field(..., description="Menu item id; negative ids are synthetic lines such as extras.")
    name: str
    quantity: int = Field(1, ge=1)
    original_price: int = Field(0, ge=0)
    discount_price: Optional[int] = Field(default=None, ge=0)
    cooking_time: Optional[float] = Field(default=None, description="Minutes; unset uses the kitchen default.")

    def to_cart_line(self) -> CartLine:
        return CartLine(item_id=self.id, name=self.name, cooking_time_minutes=self.cooking_time)


class DriverModel(BaseModel):
    name: str
    phone: Optional[str] = None


class CustomerFormModel(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    street: str = ""
    number: str = ""
    sector: str = ""
    city: str = "Puerto Montt"
    references: str = ""
    rut: Optional[str] = None
    payment_method: PaymentMethod = "efectivo"
    payment_status: PaymentStatus = "pending"
    due_method: Optional[PaymentMethod] = None


class OrderCreateRequest(BaseModel):
    customer: CustomerFormModel
    cart: List[CartItemModel] = Field(..., min_length=1)
    coordinates: Optional[CoordinatesModel] = None
    geocode_precision: GeocodePrecision = "none"
    service: ServiceType = "delivery"
    delivery_zone: Optional[str] = Field(
        default=None, description="Named sector; overrides the distance fee when no coordinates are known."
    )
    extras_total: int = Field(0, ge=0)
    note: Optional[str] = None
    created_by: str = "Cajero"


class Order(BaseModel):
    id: int
    public_code: str
    name: str
    phone: str
    address: str
    city: str
    references: Optional[str] = None
    cart: List[CartItemModel]
    total: int
    coordinates: Optional[CoordinatesModel] = None
    maps_url: Optional[str] = None
    waze_url: Optional[str] = None
    service: ServiceType = "delivery"
    status: OrderStatus = OrderStatus.PENDING
    created_at: int
    cooking_at: Optional[int] = None
    ready_at: Optional[int] = None
    pickup_at: Optional[int] = None
    delivered_at: Optional[int] = None
    pack_until: Optional[int] = None
    estimated_time: int
    delivery_fee: int = 0
    delivery_zone: Optional[str] = None
    distance_km: float = 0.0
    route_distance_m: Optional[float] = None
    created_by: str = "Cajero"
    geocode_precision: GeocodePrecision = "none"
    payment_method: PaymentMethod = "efectivo"
    payment_status: PaymentStatus = "pending"
    due_method: Optional[PaymentMethod] = None
    driver: Optional[DriverModel] = None
    note: Optional[str] = None

    def cart_lines(self) -> List[CartLine]:
        return [item.to_cart_line() for item in self.cart if item.id >= 0]


class StatusUpdateRequest(BaseModel):
    status: str
    driver: Optional[DriverModel] = None


class OrderStatistics(BaseModel):
    total: int
    pending: int
    cooking: int
    ready: int
    on_route: int
    delivered: int
    cancelled: int
    total_revenue: int
    average_order_value: float
    unpaid_orders: int
    unpaid_amount: int


class DeliveryMetrics(BaseModel):
    count: int
    avg_route_time_ms: float
    total_km: float
    avg_km: float
    with_time: int
    with_route: int
