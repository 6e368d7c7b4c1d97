"""Order storage and the order creation workflow."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Iterable, Optional

from ...persistence.filesystem import FileStorage
from ...schemas.orders import (
    CartItemModel,
    DriverModel,
    Order,
    OrderCreateRequest,
    OrderStatus,
)
from ...utils.formatting import format_address, short_code
from ...utils.links import gmaps_dir, waze_url
from ..customers.book import CustomerBook
from ..delivery.zones import NO_LOCATION_ZONE, SECTOR_ZONES, compute_delivery_fee_for, sector_fee
from ..kitchen.eta import compute_configured_eta
from ..kitchen.stations import StationClassifier
from ..menu.catalog import MenuCatalog
from .status import PACKING_WINDOW_MS, in_kitchen, is_active, parse_status

ORDERS_DOCUMENT = "orders.v3"

logger = logging.getLogger(__name__)


class OrderNotFoundError(KeyError):
    """Raised when an order id is not present in the book."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def calc_order_total(cart: Iterable[CartItemModel], extras_total: int = 0) -> int:
    """Subtotal of real items (synthetic lines have negative ids) plus extras."""

    subtotal = 0
    for item in cart:
        if item.id < 0:
            continue
        unit = item.discount_price if item.discount_price is not None else item.original_price
        subtotal += unit * item.quantity
    return subtotal + extras_total


class OrderBook:
    """JSON-backed list of orders, newest first."""

    def __init__(
        self,
        storage: FileStorage | None = None,
        *,
        menu: MenuCatalog | None = None,
        customers: CustomerBook | None = None,
    ) -> None:
        self.storage = storage or FileStorage()
        self.menu = menu
        self.customers = customers

    def list_orders(self) -> list[Order]:
        raw = self.storage.read_json(ORDERS_DOCUMENT, default=[])
        orders: list[Order] = []
        for entry in raw:
            try:
                orders.append(Order.model_validate(entry))
            except ValueError as exc:
                logger.warning(f"Skipping invalid order record: {exc}")
        return orders

    def _save(self, orders: list[Order]) -> None:
        self.storage.write_json(ORDERS_DOCUMENT, [order.model_dump(mode="json") for order in orders])

    def get(self, order_id: int) -> Order:
        for order in self.list_orders():
            if order.id == order_id:
                return order
        raise OrderNotFoundError(order_id)

    def active_orders(self) -> list[Order]:
        return [order for order in self.list_orders() if is_active(order)]

    def kitchen_queue(self) -> list[Order]:
        return [order for order in self.list_orders() if in_kitchen(order)]

    def _classifier(self) -> StationClassifier:
        if self.menu is None:
            return StationClassifier()
        return StationClassifier(self.menu.station_overrides())

    def quote_eta(self, cart: Iterable[CartItemModel], now_ms: Optional[int] = None) -> int:
        now_ms = now_ms or _now_ms()
        queue = [order.cart_lines() for order in self.kitchen_queue()]
        new_cart = [item.to_cart_line() for item in cart if item.id >= 0]
        return compute_configured_eta(
            queue,
            new_cart,
            datetime.fromtimestamp(now_ms / 1000),
            classifier=self._classifier(),
        )

    def create_order(self, request: OrderCreateRequest, now_ms: Optional[int] = None) -> Order:
        """Price delivery, quote the kitchen ETA against the active queue and persist the order."""

        now_ms = now_ms or _now_ms()
        orders = self.list_orders()
        existing_ids = {order.id for order in orders}
        order_id = now_ms
        while order_id in existing_ids:
            order_id += 1

        fee, zone_name, distance = 0, NO_LOCATION_ZONE, 0.0
        coordinates = request.coordinates
        if request.service == "local":
            zone_name = "local"
        elif coordinates is not None:
            quote = compute_delivery_fee_for(coordinates.to_domain())
            fee, zone_name, distance = quote.fee, quote.zone_name, quote.distance_km
        elif request.delivery_zone and sector_fee(request.delivery_zone) is not None:
            fee = sector_fee(request.delivery_zone)
            zone_name = SECTOR_ZONES[request.delivery_zone.strip().lower()][0]

        estimated = self.quote_eta(request.cart, now_ms)
        customer = request.customer

        order = Order(
            id=order_id,
            public_code=short_code(order_id),
            name=customer.name.strip(),
            phone=customer.phone.strip(),
            address=format_address(customer.street, customer.number, customer.sector),
            city=customer.city,
            references=customer.references or None,
            cart=list(request.cart),
            total=calc_order_total(request.cart, request.extras_total) + fee,
            coordinates=coordinates,
            maps_url=gmaps_dir(coordinates.lat, coordinates.lng) if coordinates else None,
            waze_url=waze_url(coordinates.lat, coordinates.lng) if coordinates else None,
            service=request.service,
            status=OrderStatus.PENDING,
            created_at=now_ms,
            estimated_time=estimated,
            delivery_fee=fee,
            delivery_zone=zone_name,
            distance_km=round(distance, 3),
            created_by=request.created_by,
            geocode_precision=request.geocode_precision,
            payment_method=customer.payment_method,
            payment_status=customer.payment_status,
            due_method=customer.due_method,
            note=request.note,
        )

        self._save([order, *orders])
        logger.info(
            f"Order {order.public_code} created: total={order.total} fee={fee} zone={zone_name} eta={estimated}min"
        )

        if self.customers is not None:
            self.customers.add_or_update(customer, now_ms=now_ms)
            self.customers.update_stats(customer.phone, order.total, now_ms=now_ms)
        return order

    def _apply(self, order_id: int, changes: dict) -> Order:
        orders = self.list_orders()
        for index, order in enumerate(orders):
            if order.id == order_id:
                updated = order.model_copy(update=changes)
                orders[index] = updated
                self._save(orders)
                return updated
        raise OrderNotFoundError(order_id)

    def update_status(
        self,
        order_id: int,
        status: object,
        now_ms: Optional[int] = None,
        *,
        driver: DriverModel | None = None,
    ) -> Order:
        """Move an order to ``status`` and stamp the matching lifecycle timestamp."""

        now_ms = now_ms or _now_ms()
        target = parse_status(status)
        changes: dict = {"status": target}
        if target is OrderStatus.COOKING:
            # The first time an order enters the kitchen is kept.
            if self.get(order_id).cooking_at is None:
                changes["cooking_at"] = now_ms
        elif target is OrderStatus.READY:
            changes["ready_at"] = now_ms
            changes["pack_until"] = now_ms + PACKING_WINDOW_MS
        elif target is OrderStatus.ON_ROUTE:
            changes["pickup_at"] = now_ms
        elif target is OrderStatus.DELIVERED:
            changes["delivered_at"] = now_ms
        if driver is not None:
            changes["driver"] = driver
        updated = self._apply(order_id, changes)
        logger.info(f"Order {updated.public_code} moved to {target.value}")
        return updated

    def assign_driver(self, order_id: int, name: str, phone: Optional[str] = None) -> Order:
        return self._apply(order_id, {"driver": DriverModel(name=name, phone=phone)})

    def set_ready(self, order_id: int, now_ms: Optional[int] = None) -> Order:
        return self.update_status(order_id, OrderStatus.READY, now_ms)

    def start_route(self, order_id: int, now_ms: Optional[int] = None) -> Order:
        return self.update_status(order_id, OrderStatus.ON_ROUTE, now_ms)

    def mark_delivered(self, order_id: int, now_ms: Optional[int] = None) -> Order:
        return self.update_status(order_id, OrderStatus.DELIVERED, now_ms)
