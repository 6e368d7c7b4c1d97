"""Order statistics for the dashboard and the delivery board."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from ...schemas.orders import DeliveryMetrics, Order, OrderStatistics, OrderStatus
from .status import normalize_status

UNPAID_STATUSES = frozenset({"pending", "unpaid", "due"})


def order_statistics(orders: Sequence[Order]) -> OrderStatistics:
    counts: Counter[OrderStatus] = Counter(normalize_status(order.status) for order in orders)
    billable = [order for order in orders if normalize_status(order.status) is not OrderStatus.CANCELLED]
    revenue = sum(order.total for order in billable)
    unpaid = [order for order in billable if order.payment_status in UNPAID_STATUSES]

    return OrderStatistics(
        total=len(orders),
        pending=counts[OrderStatus.PENDING],
        cooking=counts[OrderStatus.COOKING],
        ready=counts[OrderStatus.READY],
        on_route=counts[OrderStatus.ON_ROUTE],
        delivered=counts[OrderStatus.DELIVERED],
        cancelled=counts[OrderStatus.CANCELLED],
        total_revenue=revenue,
        average_order_value=round(revenue / len(billable), 2) if billable else 0.0,
        unpaid_orders=len(unpaid),
        unpaid_amount=sum(order.total for order in unpaid),
    )


def delivery_metrics(orders: Sequence[Order]) -> DeliveryMetrics:
    delivered = [order for order in orders if normalize_status(order.status) is OrderStatus.DELIVERED]
    if not delivered:
        return DeliveryMetrics(count=0, avg_route_time_ms=0, total_km=0, avg_km=0, with_time=0, with_route=0)

    sum_time = sum_meters = 0.0
    with_time = with_route = 0
    for order in delivered:
        if order.pickup_at and order.delivered_at and order.delivered_at >= order.pickup_at:
            sum_time += order.delivered_at - order.pickup_at
            with_time += 1
        if order.route_distance_m is not None and order.route_distance_m >= 0:
            sum_meters += order.route_distance_m
            with_route += 1

    return DeliveryMetrics(
        count=len(delivered),
        avg_route_time_ms=sum_time / with_time if with_time else 0.0,
        total_km=sum_meters / 1000,
        avg_km=(sum_meters / with_route) / 1000 if with_route else 0.0,
        with_time=with_time,
        with_route=with_route,
    )
