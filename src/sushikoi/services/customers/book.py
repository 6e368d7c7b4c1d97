"""Customer address book keyed by phone number."""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

from ...persistence.filesystem import FileStorage
from ...schemas.customers import CustomerRecord, CustomerSearchCriteria
from ...utils.formatting import phone_key

CUSTOMERS_DOCUMENT = "customers.v1"
DEFAULT_CITY = "Puerto Montt"

logger = logging.getLogger(__name__)


class CustomerNotFoundError(KeyError):
    """Raised when no customer matches the given phone."""


class CustomerLike(Protocol):
    name: str
    phone: str
    street: str
    number: str
    sector: str
    city: str
    references: str


def _now_ms() -> int:
    return int(time.time() * 1000)


def _recency_key(record: CustomerRecord) -> tuple[int, int, int]:
    """Most recent order first; customers who never ordered go last, by spend."""

    if record.last_order_at:
        return (0, -record.last_order_at, -record.total_spent)
    return (1, 0, -record.total_spent)


class CustomerBook:
    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()

    def list_customers(self) -> list[CustomerRecord]:
        raw = self.storage.read_json(CUSTOMERS_DOCUMENT, default=[])
        records: list[CustomerRecord] = []
        for entry in raw:
            try:
                records.append(CustomerRecord.model_validate(entry))
            except ValueError as exc:
                logger.warning(f"Skipping invalid customer record: {exc}")
        return records

    def _save(self, records: list[CustomerRecord]) -> None:
        self.storage.write_json(CUSTOMERS_DOCUMENT, [record.model_dump(mode="json") for record in records])

    def get_by_phone(self, phone: str) -> Optional[CustomerRecord]:
        key = phone_key(phone)
        for record in self.list_customers():
            if phone_key(record.phone) == key:
                return record
        return None

    def add_or_update(self, customer: CustomerLike, now_ms: Optional[int] = None) -> CustomerRecord:
        """Insert or refresh contact details; order counters are preserved on update."""

        now_ms = now_ms or _now_ms()
        key = phone_key(customer.phone)
        records = self.list_customers()
        index = next((i for i, r in enumerate(records) if phone_key(r.phone) == key), None)
        existing = records[index] if index is not None else None

        record = CustomerRecord(
            id=key or customer.phone,
            name=(customer.name or "").strip() or "Sin nombre",
            phone=(customer.phone or "").strip(),
            street=(customer.street or "").strip(),
            number=(customer.number or "").strip(),
            sector=(customer.sector or "").strip(),
            city=(customer.city or "").strip() or DEFAULT_CITY,
            references=(customer.references or "").strip(),
            created_at=existing.created_at if existing else now_ms,
            updated_at=now_ms,
            total_orders=existing.total_orders if existing else 0,
            total_spent=existing.total_spent if existing else 0,
            last_order_at=existing.last_order_at if existing else None,
        )
        if index is None:
            records.append(record)
        else:
            records[index] = record
        self._save(records)
        return record

    def update_stats(self, phone: str, order_total: int, now_ms: Optional[int] = None) -> CustomerRecord:
        now_ms = now_ms or _now_ms()
        key = phone_key(phone)
        records = self.list_customers()
        for index, record in enumerate(records):
            if phone_key(record.phone) == key:
                updated = record.model_copy(
                    update={
                        "total_orders": record.total_orders + 1,
                        "total_spent": record.total_spent + int(order_total or 0),
                        "last_order_at": now_ms,
                        "updated_at": now_ms,
                    }
                )
                records[index] = updated
                self._save(records)
                return updated
        raise CustomerNotFoundError(phone)

    def delete(self, phone: str) -> None:
        key = phone_key(phone)
        records = self.list_customers()
        remaining = [record for record in records if phone_key(record.phone) != key]
        if len(remaining) == len(records):
            raise CustomerNotFoundError(phone)
        self._save(remaining)
        logger.info(f"Customer {key} deleted")

    def search(self, criteria: CustomerSearchCriteria) -> list[CustomerRecord]:
        records = self.list_customers()

        if criteria.phone:
            wanted = phone_key(criteria.phone)
            records = [r for r in records if wanted in phone_key(r.phone)]
        if criteria.name:
            wanted = criteria.name.strip().lower()
            records = [r for r in records if wanted in r.name.lower()]
        if criteria.city:
            wanted = criteria.city.strip().lower()
            records = [r for r in records if wanted in r.city.lower()]
        if criteria.query:
            text = criteria.query.strip().lower()
            digits = phone_key(criteria.query)

            def matches(record: CustomerRecord) -> bool:
                if text in record.name.lower():
                    return True
                if digits and digits in phone_key(record.phone):
                    return True
                return text in f"{record.street} {record.number}".lower()

            records = [r for r in records if matches(r)]

        return sorted(records, key=_recency_key)[: criteria.limit]

    def top_customers(self, limit: int = 10) -> list[CustomerRecord]:
        spenders = [record for record in self.list_customers() if record.total_spent > 0]
        return sorted(spenders, key=lambda record: record.total_spent, reverse=True)[:limit]
