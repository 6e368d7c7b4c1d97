"""Order workflow and board helpers."""

from .book import OrderBook, OrderNotFoundError, calc_order_total
from .metrics import delivery_metrics, order_statistics
from .status import (
    group_by_status,
    is_active,
    is_overdue,
    minutes_left_for,
    normalize_status,
    parse_status,
    progress_for,
    sort_by_priority,
)

__all__ = [
    "OrderBook",
    "OrderNotFoundError",
    "calc_order_total",
    "delivery_metrics",
    "group_by_status",
    "is_active",
    "is_overdue",
    "minutes_left_for",
    "normalize_status",
    "order_statistics",
    "parse_status",
    "progress_for",
    "sort_by_priority",
]
