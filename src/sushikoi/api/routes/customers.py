"""Customer directory endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.customers import CustomerModel, CustomerRecord, CustomerSearchCriteria, CustomerSearchResponse
from ...services.customers import CustomerBook, CustomerNotFoundError
from ..dependencies import get_customer_book

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=CustomerSearchResponse, status_code=status.HTTP_200_OK)
def search_customers(
    q: str | None = Query(default=None, description="Free text over name, phone digits and street"),
    phone: str | None = Query(default=None),
    name: str | None = Query(default=None),
    city: str | None = Query(default=None),
    limit: int = Query(default=10, ge=1, le=500),
    book: CustomerBook = Depends(get_customer_book),
) -> CustomerSearchResponse:
    criteria = CustomerSearchCriteria(query=q, phone=phone, name=name, city=city, limit=limit)
    items = book.search(criteria)
    return CustomerSearchResponse(items=items, total=len(items))


@router.post("", response_model=CustomerRecord, status_code=status.HTTP_200_OK)
def upsert_customer(payload: CustomerModel, book: CustomerBook = Depends(get_customer_book)) -> CustomerRecord:
    return book.add_or_update(payload)


@router.get("/top", response_model=List[CustomerRecord], status_code=status.HTTP_200_OK)
def top_customers(
    limit: int = Query(default=10, ge=1, le=100),
    book: CustomerBook = Depends(get_customer_book),
) -> List[CustomerRecord]:
    return book.top_customers(limit=limit)


@router.delete("/{phone}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(phone: str, book: CustomerBook = Depends(get_customer_book)) -> None:
    try:
        book.delete(phone)
    except CustomerNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Customer {phone} not found.") from exc
