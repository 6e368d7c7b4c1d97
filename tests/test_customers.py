from pathlib import Path

import pytest

from sushikoi.persistence.filesystem import FileStorage
from sushikoi.schemas.customers import CustomerModel, CustomerSearchCriteria
from sushikoi.services.customers import CustomerBook, CustomerNotFoundError


@pytest.fixture
def book(tmp_path: Path) -> CustomerBook:
    customers = CustomerBook(FileStorage(root=tmp_path))
    customers.add_or_update(CustomerModel(name="Ana Pérez", phone="+56 9 1111 2222", street="Urmeneta", number="300"), now_ms=1)
    customers.add_or_update(CustomerModel(name="Bruno Soto", phone="9 3333-4444", street="Egaña", number="12", city="Puerto Varas"), now_ms=2)
    customers.add_or_update(CustomerModel(name="Carla Ruiz", phone="955556666", street="Benavente"), now_ms=3)
    return customers


def test_add_or_update_keys_by_phone_digits(book: CustomerBook) -> None:
    book.update_stats("56911112222", 10000, now_ms=10)
    updated = book.add_or_update(CustomerModel(name="Ana P.", phone="+56-9-1111-2222", street="Urmeneta", number="305"), now_ms=20)

    assert len(book.list_customers()) == 3
    assert updated.id == "56911112222"
    assert updated.number == "305"
    assert updated.created_at == 1
    assert updated.updated_at == 20
    assert updated.total_orders == 1
    assert updated.total_spent == 10000


def test_blank_name_and_city_get_defaults(book: CustomerBook) -> None:
    record = book.add_or_update(CustomerModel(phone="977778888"), now_ms=5)
    assert record.name == "Sin nombre"
    assert record.city == "Puerto Montt"


def test_update_stats_requires_known_customer(book: CustomerBook) -> None:
    with pytest.raises(CustomerNotFoundError):
        book.update_stats("000", 100)


def test_search_by_free_text(book: CustomerBook) -> None:
    by_name = book.search(CustomerSearchCriteria(query="bruno"))
    assert [record.name for record in by_name] == ["Bruno Soto"]

    by_digits = book.search(CustomerSearchCriteria(query="5555"))
    assert [record.name for record in by_digits] == ["Carla Ruiz"]

    by_street = book.search(CustomerSearchCriteria(query="urmeneta 300"))
    assert [record.name for record in by_street] == ["Ana Pérez"]


def test_text_query_without_digits_does_not_match_every_phone(book: CustomerBook) -> None:
    assert book.search(CustomerSearchCriteria(query="zzz")) == []


def test_search_filters_and_recency_order(book: CustomerBook) -> None:
    book.update_stats("955556666", 5000, now_ms=100)
    book.update_stats("56911112222", 9000, now_ms=200)

    everyone = book.search(CustomerSearchCriteria())
    assert [record.name for record in everyone] == ["Ana Pérez", "Carla Ruiz", "Bruno Soto"]

    varas = book.search(CustomerSearchCriteria(city="varas"))
    assert [record.name for record in varas] == ["Bruno Soto"]

    assert len(book.search(CustomerSearchCriteria(limit=1))) == 1


def test_top_customers_by_spend(book: CustomerBook) -> None:
    book.update_stats("955556666", 5000, now_ms=100)
    book.update_stats("56911112222", 9000, now_ms=200)
    book.update_stats("955556666", 8000, now_ms=300)

    top = book.top_customers(limit=5)
    assert [(record.name, record.total_spent) for record in top] == [("Carla Ruiz", 13000), ("Ana Pérez", 9000)]


def test_delete(book: CustomerBook) -> None:
    book.delete("9 5555 6666")
    assert book.get_by_phone("955556666") is None
    with pytest.raises(CustomerNotFoundError):
        book.delete("955556666")


def test_corrupt_records_are_skipped(book: CustomerBook, caplog: pytest.LogCaptureFixture) -> None:
    raw = book.storage.read_json("customers.v1", default=[])
    raw.append({"id": "broken", "phone": "912345678", "created_at": "yesterday"})
    book.storage.write_json("customers.v1", raw)

    with caplog.at_level("WARNING"):
        records = book.list_customers()

    assert len(records) == 3
    assert "Skipping invalid customer record" in caplog.text
    assert book.get_by_phone("955556666") is not None
