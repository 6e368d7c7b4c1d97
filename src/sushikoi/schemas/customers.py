"""Customer-facing API schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CustomerModel(BaseModel):
    name: str = ""
    phone: str
    street: str = ""
    number: str = ""
    sector: str = ""
    city: str = ""
    references: str = ""


class CustomerRecord(CustomerModel):
    id: str
    created_at: int
    updated_at: int
    total_orders: int = 0
    total_spent: int = 0
    last_order_at: Optional[int] = None


class CustomerSearchResponse(BaseModel):
    items: List[CustomerRecord]
    total: int


class CustomerSearchCriteria(BaseModel):
    query: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    limit: int = Field(10, ge=1, le=500)
