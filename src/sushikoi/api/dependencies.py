"""Request-scoped providers for the JSON-backed stores."""

from __future__ import annotations

from pathlib import Path

from fastapi import Depends

from ..config import settings
from ..persistence.filesystem import FileStorage
from ..services.cashup import CashupStore
from ..services.customers import CustomerBook
from ..services.geocoding import NominatimClient
from ..services.menu import MenuCatalog
from ..services.orders import OrderBook

# One catalog per data root so subscribers survive across requests.
_catalogs: dict[Path, MenuCatalog] = {}


def get_storage() -> FileStorage:
    return FileStorage(root=settings.data_root)


def get_menu_catalog(storage: FileStorage = Depends(get_storage)) -> MenuCatalog:
    catalog = _catalogs.get(storage.root)
    if catalog is None:
        catalog = MenuCatalog(storage)
        _catalogs[storage.root] = catalog
    catalog.reload_if_changed()
    return catalog


def get_customer_book(storage: FileStorage = Depends(get_storage)) -> CustomerBook:
    return CustomerBook(storage)


def get_order_book(
    storage: FileStorage = Depends(get_storage),
    menu: MenuCatalog = Depends(get_menu_catalog),
    customers: CustomerBook = Depends(get_customer_book),
) -> OrderBook:
    return OrderBook(storage, menu=menu, customers=customers)


def get_cashup_store(storage: FileStorage = Depends(get_storage)) -> CashupStore:
    return CashupStore(storage)


def get_geocoder() -> NominatimClient:
    return NominatimClient()
