from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sushikoi.api import dependencies
from sushikoi.config import settings
from sushikoi.main import create_app
from sushikoi.services.delivery import store_origin
from sushikoi.services.geocoding import GeocodeResult


class DummyGeocoder:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error

    def geocode(self, street, number=None, sector=None, city=None):
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    # every store in the app writes under tmp_path
    monkeypatch.setattr(settings, "data_root", tmp_path)
    monkeypatch.setattr(dependencies, "_catalogs", {})
    return TestClient(create_app())


def _order_payload(**overrides) -> dict:
    origin = store_origin()
    payload = {
        "customer": {"name": "Ana", "phone": "+56 9 1111 2222", "street": "Urmeneta", "number": "300"},
        "cart": [{"id": 1101, "name": "ACEVICHADO ROLL PREMIUM", "original_price": 9680, "cooking_time": 10}],
        "coordinates": {"lat": origin.latitude + 3.0 / 111.195, "lng": origin.longitude},
    }
    payload.update(overrides)
    return payload


def test_root_and_health(api_client: TestClient) -> None:
    assert api_client.get("/").json()["status"] == "running"
    assert api_client.get("/api/health").json()["status"] == "ok"


def test_delivery_fee_quote(api_client: TestClient) -> None:
    origin = store_origin()
    response = api_client.post(
        "/api/quotes/delivery-fee",
        json={"latitude": origin.latitude + 6.0 / 111.195, "longitude": origin.longitude},
    )
    assert response.status_code == 200
    assert response.json()["fee"] == 3500
    assert response.json()["zone_name"] == "Lejos"

    empty = api_client.post("/api/quotes/delivery-fee", json={})
    assert empty.json() == {"fee": 0, "zone_name": "no location", "distance_km": 0.0}

    partial = api_client.post("/api/quotes/delivery-fee", json={"latitude": -41.4})
    assert partial.status_code == 422


def test_eta_quote_includes_active_orders(api_client: TestClient) -> None:
    cart = [{"id": 5, "name": "Tempura", "original_price": 1000, "cooking_time": 30}]
    assert api_client.post("/api/quotes/eta", json={"cart": cart}).json() == {"minutes": 30, "active_orders": 0}

    api_client.post("/api/orders", json=_order_payload(cart=cart))
    quote = api_client.post("/api/quotes/eta", json={"cart": cart}).json()
    assert quote == {"minutes": 60, "active_orders": 1}


def test_menu_endpoints(api_client: TestClient, tmp_path: Path) -> None:
    menu = api_client.get("/api/menu").json()
    assert any(item["id"] == 1101 for item in menu["items"])
    assert api_client.get("/api/menu/1101").json()["name"] == "ACEVICHADO ROLL PREMIUM"
    assert api_client.get("/api/menu/9").status_code == 404

    saved = api_client.put("/api/menu", json={"items": [{"id": 9, "name": "Roll del día", "price": 4500, "station": "hot"}]})
    assert saved.status_code == 200
    assert saved.json()["updated_at"] > 0
    assert (tmp_path / "menu.db.v1.json").exists()
    assert api_client.get("/api/menu/9").json()["station"] == "hot"

    duplicate = api_client.put(
        "/api/menu",
        json={"items": [{"id": 1, "name": "A", "price": 1}, {"id": 1, "name": "B", "price": 1}]},
    )
    assert duplicate.status_code == 422


def test_menu_station_drives_eta(api_client: TestClient) -> None:
    api_client.put("/api/menu", json={"items": [{"id": 9, "name": "Roll del día", "price": 4500, "station": "hot"}]})
    cart = [{"id": 9, "name": "Roll del día", "original_price": 4500, "cooking_time": 25}]
    assert api_client.post("/api/quotes/eta", json={"cart": cart}).json()["minutes"] == 25


def test_order_lifecycle(api_client: TestClient) -> None:
    created = api_client.post("/api/orders", json=_order_payload())
    assert created.status_code == 201
    order = created.json()
    assert order["delivery_fee"] == 2500
    assert order["delivery_zone"] == "Media"
    assert order["total"] == 9680 + 2500
    assert order["status"] == "pending"

    fetched = api_client.get(f"/api/orders/{order['id']}")
    assert fetched.json()["public_code"] == order["public_code"]

    updated = api_client.post(f"/api/orders/{order['id']}/status", json={"status": "listo"})
    assert updated.json()["status"] == "ready"
    assert updated.json()["pack_until"] == updated.json()["ready_at"] + 90_000

    listed = api_client.get("/api/orders", params={"status": "ready"}).json()
    assert [entry["id"] for entry in listed] == [order["id"]]
    assert api_client.get("/api/orders", params={"status": "pending"}).json() == []

    stats = api_client.get("/api/orders/stats").json()
    assert stats["total"] == 1
    assert stats["ready"] == 1
    assert stats["total_revenue"] == order["total"]

    assert api_client.get("/api/orders/delivery-metrics").json()["count"] == 0
    assert api_client.get("/api/orders/1").status_code == 404
    assert api_client.post("/api/orders/1/status", json={"status": "ready"}).status_code == 404


def test_order_updates_customer_directory(api_client: TestClient) -> None:
    api_client.post("/api/orders", json=_order_payload())

    found = api_client.get("/api/customers", params={"q": "1111"}).json()
    assert found["total"] == 1
    assert found["items"][0]["total_orders"] == 1

    top = api_client.get("/api/customers/top").json()
    assert top[0]["name"] == "Ana"


def test_customer_endpoints(api_client: TestClient) -> None:
    saved = api_client.post("/api/customers", json={"name": "Bruno", "phone": "9 3333-4444", "street": "Egaña"})
    assert saved.status_code == 200
    assert saved.json()["id"] == "933334444"

    assert api_client.get("/api/customers", params={"name": "bru"}).json()["total"] == 1
    assert api_client.delete("/api/customers/933334444").status_code == 204
    assert api_client.delete("/api/customers/933334444").status_code == 404


def test_cashup_flow(api_client: TestClient) -> None:
    opened = api_client.post("/api/cashup/open", json={"cashier_name": "Camila"})
    assert opened.status_code == 201
    assert opened.json()["open"]["opening_float"] == 45000
    assert api_client.post("/api/cashup/open", json={"cashier_name": "Diego"}).status_code == 409

    expense = api_client.post("/api/cashup/expenses", json={"concept": "Hielo", "amount": 3000})
    assert expense.json()["ops"]["sales"]["expected_cash_in_drawer"] == 42000
    assert api_client.get("/api/cashup/current").json()["id"] == opened.json()["id"]

    bad = api_client.post("/api/cashup/close", json={"quantities": {"3000": 1}})
    assert bad.status_code == 422

    closed = api_client.post("/api/cashup/close", json={"quantities": {"20000": 2, "2000": 1}})
    assert closed.status_code == 200
    assert closed.json()["status"] == "CLOSED"
    assert closed.json()["close"]["diff"] == 0

    assert api_client.post("/api/cashup/close", json={"quantities": {}}).status_code == 409
    assert len(api_client.get("/api/cashup/sessions").json()) == 1


def test_geocode_endpoint(api_client: TestClient) -> None:
    app = api_client.app
    origin = store_origin()
    result = GeocodeResult(latitude=origin.latitude, longitude=origin.longitude, precision="exact", matched_number=True)

    app.dependency_overrides[dependencies.get_geocoder] = lambda: DummyGeocoder(result)
    found = api_client.post("/api/quotes/geocode", json={"street": "Capitán Ávalos", "number": "6130"})
    assert found.status_code == 200
    assert found.json()["delivery"]["zone_name"] == "Cerca"

    app.dependency_overrides[dependencies.get_geocoder] = lambda: DummyGeocoder(None)
    assert api_client.post("/api/quotes/geocode", json={"street": "Nada"}).status_code == 404

    app.dependency_overrides[dependencies.get_geocoder] = lambda: DummyGeocoder(error=ConnectionError("down"))
    assert api_client.post("/api/quotes/geocode", json={"street": "Nada"}).status_code == 502
    app.dependency_overrides.clear()


def test_status_typo_is_rejected(api_client: TestClient) -> None:
    order = api_client.post("/api/orders", json=_order_payload()).json()
    delivered = api_client.post(f"/api/orders/{order['id']}/status", json={"status": "delivered"})
    assert delivered.json()["status"] == "delivered"

    typo = api_client.post(f"/api/orders/{order['id']}/status", json={"status": "deliverd"})
    assert typo.status_code == 422
    assert "deliverd" in typo.json()["detail"]
    assert api_client.get(f"/api/orders/{order['id']}").json()["status"] == "delivered"
