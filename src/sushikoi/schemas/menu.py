"""Pydantic models for the menu catalog."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Station


class MenuItem(BaseModel):
    id: int
    type: Literal["promo", "individual", "extra"] = "individual"
    name: str
    price: int = Field(..., ge=0, description="Price in CLP.")
    time: int = Field(12, ge=0, description="Cooking time in minutes.")
    desc: str = ""
    category: str = "PRODUCTOS INDIVIDUALES"
    subgroup: str = ""
    tags: List[str] = Field(default_factory=list)
    emoji: str = "🍣"
    soy_included: int = Field(0, ge=0)
    station: Optional[Station] = Field(
        default=None, description="Declared kitchen station; unset items are classified by name."
    )


class MenuDB(BaseModel):
    items: List[MenuItem]
    updated_at: int = Field(0, description="Epoch milliseconds of the last committed save.")
