"""Menu catalog store with hot reload and change notifications."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ...models.domain import Station
from ...persistence.filesystem import FileStorage
from ...schemas.menu import MenuDB, MenuItem

MENU_DOCUMENT = "menu.db.v1"

logger = logging.getLogger(__name__)

MenuListener = Callable[[MenuDB], None]


def _promo(item_id: int, name: str, price: int, time_min: int, desc: str, emoji: str, soy: int) -> MenuItem:
    return MenuItem(
        id=item_id,
        type="promo",
        name=name,
        price=price,
        time=time_min,
        desc=desc,
        category="PROMOCIONES",
        emoji=emoji,
        soy_included=soy,
    )


def _single(item_id: int, name: str, price: int, time_min: int, desc: str, emoji: str, soy: int = 0) -> MenuItem:
    return MenuItem(
        id=item_id,
        name=name,
        price=price,
        time=time_min,
        desc=desc,
        emoji=emoji,
        soy_included=soy,
    )


DEFAULT_MENU: tuple[MenuItem, ...] = (
    _promo(1001, "KOI 1 (35 Bocados fríos)", 21990, 18, "Selección fría con salmón, camarón y kanikama", "🍣", 4),
    _promo(1002, "PROMOCIÓN 1 (36 Bocados mixtos)", 21990, 22, "Mix frío + frito (panko)", "🥢", 4),
    _promo(1003, "KOI MIX (45 Bocados mixtos)", 25990, 24, "Envueltos + fritos panko", "🍱", 5),
    _promo(1004, "KOI 54 (54 Bocados mixtos)", 28990, 28, "6 variedades entre envueltos y fritos", "🧧", 6),
    _single(1101, "ACEVICHADO ROLL PREMIUM", 9680, 10, "Envuelto palta + ceviche, salsa acevichada", "🔥", 1),
    _single(1201, "AVOCADO (ENV PALTA)", 5990, 9, "Queso crema, salmón", "🥑", 1),
    _single(1202, "FURAY ( Panko)", 6390, 11, "Salmón, queso, cebollín", "🍤", 1),
    _single(1203, "PANKO POLLO QUESO PALTA", 6200, 10, "Pollo panko, queso, palta", "🍗", 1),
    _single(1204, "TORI (FRITO)", 5800, 10, "Pollo, queso, morrón", "🍗", 1),
    _single(1301, "Korokes Salmón, queso (5u)", 4690, 8, "Croquetas crujientes de salmón", "🟠"),
    _single(1302, "Korokes pollo queso (5u)", 3600, 8, "Croquetas crujientes de pollo", "🟡"),
    _single(1401, "Sashimi Sake (6 cortes)", 4990, 6, "Salmón fresco", "🔪"),
    _single(1501, "Gyozas de Camarón (5u)", 3990, 7, "Empanaditas japonesas", "🥟"),
)


class MenuCatalog:
    """Menu document persisted as JSON.

    Listeners run synchronously after every committed save or reload. A
    listener that raises is logged and skipped so the remaining ones are still
    notified.
    """

    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self._listeners: list[MenuListener] = []
        self._db: MenuDB | None = None
        self._loaded_mtime: int | None = None

    def _load(self) -> MenuDB:
        raw = self.storage.read_json(MENU_DOCUMENT)
        self._loaded_mtime = self.storage.modified_at(MENU_DOCUMENT)
        if raw is None:
            return MenuDB(items=list(DEFAULT_MENU), updated_at=0)
        try:
            return MenuDB.model_validate(raw)
        except ValueError as exc:
            logger.warning(f"Menu document is invalid, serving the default menu: {exc}")
            return MenuDB(items=list(DEFAULT_MENU), updated_at=0)

    def get_db(self) -> MenuDB:
        if self._db is None:
            self._db = self._load()
        return self._db

    def list_items(self) -> list[MenuItem]:
        return list(self.get_db().items)

    def get_item(self, item_id: int) -> Optional[MenuItem]:
        for item in self.get_db().items:
            if item.id == item_id:
                return item
        return None

    def station_overrides(self) -> dict[int, Station]:
        return {item.id: item.station for item in self.get_db().items if item.station is not None}

    def save_db(self, db: MenuDB) -> MenuDB:
        ids = [item.id for item in db.items]
        if len(ids) != len(set(ids)):
            raise ValueError("menu item ids must be unique")
        committed = db.model_copy(update={"updated_at": int(time.time() * 1000)})
        self.storage.write_json(MENU_DOCUMENT, committed.model_dump(mode="json"))
        self._db = committed
        self._loaded_mtime = self.storage.modified_at(MENU_DOCUMENT)
        logger.info(f"Menu saved with {len(committed.items)} items")
        self._notify(committed)
        return committed

    def reload_if_changed(self) -> bool:
        """Re-read the document when another writer touched it; returns True on reload."""

        current = self.storage.modified_at(MENU_DOCUMENT)
        if self._db is not None and current == self._loaded_mtime:
            return False
        self._db = self._load()
        logger.info(f"Menu reloaded from {self.storage.path_for(MENU_DOCUMENT)}")
        self._notify(self._db)
        return True

    def subscribe(self, listener: MenuListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, db: MenuDB) -> None:
        for listener in list(self._listeners):
            try:
                listener(db)
            except Exception:
                logger.exception(f"Menu listener {listener!r} failed")
