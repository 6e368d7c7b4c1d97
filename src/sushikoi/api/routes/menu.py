"""Menu catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.menu import MenuDB, MenuItem
from ...services.menu import MenuCatalog
from ..dependencies import get_menu_catalog

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("", response_model=MenuDB, status_code=status.HTTP_200_OK)
def get_menu(catalog: MenuCatalog = Depends(get_menu_catalog)) -> MenuDB:
    return catalog.get_db()


@router.put("", response_model=MenuDB, status_code=status.HTTP_200_OK)
def save_menu(payload: MenuDB, catalog: MenuCatalog = Depends(get_menu_catalog)) -> MenuDB:
    try:
        return catalog.save_db(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.get("/{item_id}", response_model=MenuItem, status_code=status.HTTP_200_OK)
def get_menu_item(item_id: int, catalog: MenuCatalog = Depends(get_menu_catalog)) -> MenuItem:
    item = catalog.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Menu item {item_id} not found.")
    return item
