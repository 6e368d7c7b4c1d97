"""Status normalization, progress and ordering helpers for orders."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ...schemas.orders import Order, OrderStatus
from ...utils.formatting import clamp_percentage

PACKING_WINDOW_MS = 90_000
MIN_ESTIMATE_MINUTES = 5
DEFAULT_ESTIMATE_MINUTES = 15

STATUS_ALIASES: dict[str, OrderStatus] = {
    "pending": OrderStatus.PENDING,
    "pendiente": OrderStatus.PENDING,
    "cooking": OrderStatus.COOKING,
    "cocinando": OrderStatus.COOKING,
    "en_cocina": OrderStatus.COOKING,
    "ready": OrderStatus.READY,
    "listo": OrderStatus.READY,
    "ready_for_pickup": OrderStatus.READY,
    "ready_to_deliver": OrderStatus.READY,
    "listo_para_retiro": OrderStatus.READY,
    "on_route": OrderStatus.ON_ROUTE,
    "en_ruta": OrderStatus.ON_ROUTE,
    "delivered": OrderStatus.DELIVERED,
    "entregado": OrderStatus.DELIVERED,
    "cancelled": OrderStatus.CANCELLED,
    "cancelado": OrderStatus.CANCELLED,
}

PROGRESS_RANGES: dict[OrderStatus, tuple[int, int]] = {
    OrderStatus.PENDING: (0, 25),
    OrderStatus.COOKING: (25, 85),
    OrderStatus.READY: (85, 100),
    OrderStatus.ON_ROUTE: (90, 100),
    OrderStatus.DELIVERED: (100, 100),
    OrderStatus.CANCELLED: (0, 0),
}

PRIORITY_RANK: dict[OrderStatus, int] = {
    OrderStatus.COOKING: 0,
    OrderStatus.PENDING: 1,
    OrderStatus.READY: 2,
    OrderStatus.ON_ROUTE: 3,
    OrderStatus.DELIVERED: 4,
    OrderStatus.CANCELLED: 5,
}

CLOSED_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})
# Orders that still hold kitchen stations.
KITCHEN_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.COOKING, OrderStatus.READY})


@dataclass(slots=True)
class ProgressInfo:
    pct: int
    label: str


def normalize_status(value: object) -> OrderStatus:
    """Map Spanish/English aliases to a canonical status; anything unknown is pending."""

    if isinstance(value, OrderStatus):
        return value
    key = str(value if value is not None else "").strip().lower()
    return STATUS_ALIASES.get(key, OrderStatus.PENDING)


def parse_status(value: object) -> OrderStatus:
    """Strict counterpart of :func:`normalize_status` for writes; unknown values raise ValueError."""

    if isinstance(value, OrderStatus):
        return value
    key = str(value if value is not None else "").strip().lower()
    try:
        return STATUS_ALIASES[key]
    except KeyError:
        raise ValueError(f"unknown order status '{value}'") from None


def _fraction(elapsed: float, total: float) -> float:
    if total <= 0:
        return 1.0
    return min(1.0, max(0.0, elapsed / total))


def _lerp_pct(fraction: float, low: int, high: int) -> int:
    return clamp_percentage(low + (high - low) * fraction)


def _estimate_minutes(order: Order) -> float:
    estimate = order.estimated_time if order.estimated_time else DEFAULT_ESTIMATE_MINUTES
    return max(MIN_ESTIMATE_MINUTES, estimate)


def progress_for(order: Order, now_ms: int) -> ProgressInfo:
    status = normalize_status(order.status)
    low, high = PROGRESS_RANGES[status]

    if status is OrderStatus.PENDING:
        elapsed = (now_ms - order.created_at) / 60_000
        return ProgressInfo(_lerp_pct(_fraction(elapsed, _estimate_minutes(order)), low, high), "En cola")
    if status is OrderStatus.COOKING:
        start = order.cooking_at or order.created_at
        elapsed = (now_ms - start) / 60_000
        return ProgressInfo(_lerp_pct(_fraction(elapsed, _estimate_minutes(order)), low, high), "Cocinando")
    if status is OrderStatus.READY:
        if order.pack_until:
            remaining = max(0, order.pack_until - now_ms)
            elapsed = PACKING_WINDOW_MS - remaining
            return ProgressInfo(_lerp_pct(_fraction(elapsed, PACKING_WINDOW_MS), low, high), "Empaque")
        return ProgressInfo(clamp_percentage(high), "Listo")
    if status is OrderStatus.ON_ROUTE:
        return ProgressInfo(clamp_percentage(low), "En ruta")
    if status is OrderStatus.DELIVERED:
        return ProgressInfo(100, "Entregado")
    return ProgressInfo(0, "Cancelado")


def minutes_left_for(order: Order, now_ms: int) -> int:
    status = normalize_status(order.status)
    if status in (OrderStatus.PENDING, OrderStatus.COOKING):
        remaining_ms = max(0.0, _estimate_minutes(order) * 60_000 - (now_ms - order.created_at))
        return math.ceil(remaining_ms / 60_000)
    if status is OrderStatus.READY and order.pack_until:
        return math.ceil(max(0, order.pack_until - now_ms) / 60_000)
    return 0


def eta_label(order: Order, now_ms: int) -> str:
    status = normalize_status(order.status)
    if status is OrderStatus.DELIVERED:
        return "Entregado"
    left = minutes_left_for(order, now_ms)
    if left <= 0:
        return "Listo" if status is OrderStatus.READY else "~1 min"
    return f"~{left} min"


def is_overdue(order: Order, now_ms: int) -> bool:
    if normalize_status(order.status) in CLOSED_STATUSES:
        return False
    deadline = order.created_at + _estimate_minutes(order) * 60_000
    return now_ms > deadline


def is_active(order: Order) -> bool:
    return normalize_status(order.status) not in CLOSED_STATUSES


def in_kitchen(order: Order) -> bool:
    return normalize_status(order.status) in KITCHEN_STATUSES


def priority_key(order: Order, now_ms: int) -> tuple[int, int, int]:
    """Sort key for the kitchen board: overdue first, then by status rank, then FIFO."""

    return (
        0 if is_overdue(order, now_ms) else 1,
        PRIORITY_RANK[normalize_status(order.status)],
        order.created_at,
    )


def sort_by_priority(orders: Iterable[Order], now_ms: int) -> list[Order]:
    return sorted(orders, key=lambda order: priority_key(order, now_ms))


def group_by_status(orders: Iterable[Order]) -> dict[OrderStatus, list[Order]]:
    buckets: dict[OrderStatus, list[Order]] = defaultdict(list)
    for status in OrderStatus:
        buckets[status] = []
    for order in orders:
        buckets[normalize_status(order.status)].append(order)
    return dict(buckets)


def text_match(order: Order, query: str) -> bool:
    needle = query.lower()
    haystack = (
        order.public_code,
        order.name,
        order.address,
        order.driver.name if order.driver else "",
    )
    return any(needle in (value or "").lower() for value in haystack)


def filter_orders(
    orders: Sequence[Order],
    *,
    status: Optional[str] = None,
    query: Optional[str] = None,
) -> list[Order]:
    selected = list(orders)
    if status:
        wanted = normalize_status(status)
        selected = [order for order in selected if normalize_status(order.status) is wanted]
    if query:
        selected = [order for order in selected if text_match(order, query)]
    return selected
