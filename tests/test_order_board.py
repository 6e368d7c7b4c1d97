from sushikoi.schemas.orders import CartItemModel, DriverModel, Order, OrderStatus
from sushikoi.services.orders import (
    delivery_metrics,
    group_by_status,
    is_overdue,
    minutes_left_for,
    normalize_status,
    order_statistics,
    progress_for,
    sort_by_priority,
)
from sushikoi.services.orders.status import eta_label, filter_orders

MINUTE = 60_000


def _order(order_id: int, status: OrderStatus = OrderStatus.PENDING, **fields) -> Order:
    values = dict(
        id=order_id,
        public_code=str(order_id)[-6:],
        name=f"Cliente {order_id}",
        phone="912345678",
        address="Av. Presidente Ibáñez, 100",
        city="Puerto Montt",
        cart=[CartItemModel(id=1, name="Roll", original_price=5000)],
        total=5000,
        status=status,
        created_at=0,
        estimated_time=20,
    )
    values.update(fields)
    return Order(**values)


def test_normalize_status_accepts_aliases() -> None:
    assert normalize_status("Listo") is OrderStatus.READY
    assert normalize_status("en_ruta") is OrderStatus.ON_ROUTE
    assert normalize_status("ready_for_pickup") is OrderStatus.READY
    assert normalize_status("whatever") is OrderStatus.PENDING
    assert normalize_status(None) is OrderStatus.PENDING


def test_progress_interpolates_within_status_ranges() -> None:
    assert progress_for(_order(1), 10 * MINUTE).pct == 13
    assert progress_for(_order(1, OrderStatus.COOKING, cooking_at=0), 10 * MINUTE).pct == 55

    ready = _order(1, OrderStatus.READY, pack_until=10 * MINUTE + 45_000)
    info = progress_for(ready, 10 * MINUTE)
    assert info.pct == 93
    assert info.label == "Empaque"

    assert progress_for(_order(1, OrderStatus.DELIVERED), 0).pct == 100
    assert progress_for(_order(1, OrderStatus.CANCELLED), 0).pct == 0


def test_minutes_left_and_overdue() -> None:
    order = _order(1)
    assert minutes_left_for(order, 10 * MINUTE) == 10
    assert eta_label(order, 10 * MINUTE) == "~10 min"
    assert not is_overdue(order, 20 * MINUTE)
    assert is_overdue(order, 21 * MINUTE)
    assert not is_overdue(_order(1, OrderStatus.DELIVERED), 99 * MINUTE)
    assert eta_label(_order(1, OrderStatus.DELIVERED), 0) == "Entregado"


def test_sort_by_priority_puts_overdue_then_cooking_first() -> None:
    late = _order(1, created_at=0, estimated_time=5)
    cooking = _order(2, OrderStatus.COOKING, created_at=8 * MINUTE)
    pending_old = _order(3, created_at=6 * MINUTE)
    pending_new = _order(4, created_at=9 * MINUTE)
    ready = _order(5, OrderStatus.READY, created_at=7 * MINUTE)

    ordered = sort_by_priority([ready, pending_new, cooking, pending_old, late], 10 * MINUTE)
    assert [order.id for order in ordered] == [1, 2, 3, 4, 5]


def test_group_and_filter() -> None:
    orders = [
        _order(1),
        _order(2, OrderStatus.ON_ROUTE, driver=DriverModel(name="Luis")),
        _order(3, OrderStatus.ON_ROUTE, name="Pedro"),
    ]
    groups = group_by_status(orders)
    assert set(groups) == set(OrderStatus)
    assert [order.id for order in groups[OrderStatus.ON_ROUTE]] == [2, 3]

    assert [order.id for order in filter_orders(orders, status="en_ruta", query="luis")] == [2]
    assert [order.id for order in filter_orders(orders, query="pedro")] == [3]


def test_order_statistics_excludes_cancelled_revenue() -> None:
    orders = [
        _order(1, total=10000, payment_status="paid"),
        _order(2, OrderStatus.DELIVERED, total=20000, payment_status="pending"),
        _order(3, OrderStatus.CANCELLED, total=50000, payment_status="unpaid"),
    ]
    stats = order_statistics(orders)
    assert stats.total == 3
    assert stats.pending == 1
    assert stats.delivered == 1
    assert stats.cancelled == 1
    assert stats.total_revenue == 30000
    assert stats.average_order_value == 15000
    assert stats.unpaid_orders == 1
    assert stats.unpaid_amount == 20000


def test_delivery_metrics() -> None:
    orders = [
        _order(1, OrderStatus.DELIVERED, pickup_at=MINUTE, delivered_at=11 * MINUTE, route_distance_m=3000),
        _order(2, OrderStatus.DELIVERED, pickup_at=MINUTE, delivered_at=21 * MINUTE),
        _order(3, OrderStatus.ON_ROUTE, pickup_at=MINUTE),
    ]
    metrics = delivery_metrics(orders)
    assert metrics.count == 2
    assert metrics.with_time == 2
    assert metrics.avg_route_time_ms == 15 * MINUTE
    assert metrics.with_route == 1
    assert metrics.total_km == 3.0
    assert metrics.avg_km == 3.0
    assert delivery_metrics([]).count == 0
