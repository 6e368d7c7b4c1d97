"""Order intake and kitchen board endpoints."""

from __future__ import annotations

import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.orders import DeliveryMetrics, Order, OrderCreateRequest, OrderStatistics, StatusUpdateRequest
from ...services.orders import (
    OrderBook,
    OrderNotFoundError,
    delivery_metrics,
    order_statistics,
    sort_by_priority,
)
from ...services.orders.status import filter_orders
from ..dependencies import get_order_book

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[Order], status_code=status.HTTP_200_OK)
def list_orders(
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    q: str | None = Query(default=None, description="Matches code, customer name, address or driver"),
    by_priority: bool = Query(default=False, description="Sort for the kitchen board instead of newest first"),
    book: OrderBook = Depends(get_order_book),
) -> List[Order]:
    orders = filter_orders(book.list_orders(), status=status_filter, query=q)
    if by_priority:
        orders = sort_by_priority(orders, int(time.time() * 1000))
    return orders


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreateRequest, book: OrderBook = Depends(get_order_book)) -> Order:
    return book.create_order(payload)


@router.get("/stats", response_model=OrderStatistics, status_code=status.HTTP_200_OK)
def get_order_stats(book: OrderBook = Depends(get_order_book)) -> OrderStatistics:
    return order_statistics(book.list_orders())


@router.get("/delivery-metrics", response_model=DeliveryMetrics, status_code=status.HTTP_200_OK)
def get_delivery_metrics(book: OrderBook = Depends(get_order_book)) -> DeliveryMetrics:
    return delivery_metrics(book.list_orders())


@router.get("/{order_id}", response_model=Order, status_code=status.HTTP_200_OK)
def get_order(order_id: int, book: OrderBook = Depends(get_order_book)) -> Order:
    try:
        return book.get(order_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Order {order_id} not found.") from exc


@router.post("/{order_id}/status", response_model=Order, status_code=status.HTTP_200_OK)
def update_order_status(
    order_id: int,
    payload: StatusUpdateRequest,
    book: OrderBook = Depends(get_order_book),
) -> Order:
    try:
        return book.update_status(order_id, payload.status, driver=payload.driver)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Order {order_id} not found.") from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
