import httpx
import pytest

from sushikoi.services.geocoding import NominatimClient, pick_best_match


def _record(lat: float, lon: float, road: str = "Avenida Angelmó", house_number: str | None = None) -> dict:
    address = {"road": road}
    if house_number:
        address["house_number"] = house_number
    return {"lat": str(lat), "lon": str(lon), "address": address}


def _client(handler) -> NominatimClient:
    transport = httpx.MockTransport(handler)
    return NominatimClient(
        base_url="https://geo.test",
        max_retries=1,
        backoff_seconds=0,
        client=httpx.Client(transport=transport),
    )


def test_exact_house_number_wins() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[_record(-41.48, -72.95), _record(-41.49, -72.96, house_number="1500")])

    result = _client(handler).geocode("Angelmó", "1500", "Centro")

    assert result is not None
    assert result.precision == "exact"
    assert result.matched_number is True
    assert (result.latitude, result.longitude) == (-41.49, -72.96)
    assert len(requests) == 1
    params = requests[0].url.params
    assert params["street"] == "1500 Angelmó"
    assert params["viewbox"] == "-73.2,-41.7,-72.7,-41.3"
    assert params["countrycodes"] == "cl"


def test_same_road_then_first_hit() -> None:
    records = [_record(-41.40, -72.90, road="Otra calle"), _record(-41.48, -72.95)]
    assert pick_best_match(records, "Angelmó", None).precision == "road"
    assert pick_best_match(records[:1], "Angelmó", None).precision == "fallback"
    assert pick_best_match([], "Angelmó", None) is None
    assert pick_best_match([{"lat": "x", "lon": "1"}], "Angelmó", None) is None


def test_falls_through_candidates_until_a_hit() -> None:
    calls: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        calls.append(params)
        if "q" in params and params["q"].startswith("Egaña, Puerto Montt"):
            return httpx.Response(200, json=[_record(-41.47, -72.94, road="Egaña")])
        return httpx.Response(200, json=[])

    result = _client(handler).geocode("Egaña", "12")

    assert result is not None
    assert result.precision == "road"
    assert len(calls) == 4


def test_no_results_returns_none() -> None:
    client = _client(lambda request: httpx.Response(200, json=[]))
    assert client.geocode("Calle inexistente") is None
    assert client.geocode(" a ") is None


def test_server_errors_are_retried() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, json=[_record(-41.48, -72.95)])

    result = _client(handler).geocode("Angelmó")
    assert result is not None
    assert attempts["count"] == 2


def test_unreachable_service_raises_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ConnectionError):
        _client(handler).geocode("Angelmó", "1500")


def test_candidate_queries_order() -> None:
    client = NominatimClient(base_url="https://geo.test")
    with_number = client.candidate_queries("Egaña", "12", "Centro", "Puerto Montt")
    assert [c.get("street") for c in with_number[:2]] == ["12 Egaña", "Egaña"]
    assert with_number[0]["county"] == "Centro"
    assert with_number[2]["q"] == "Egaña, 12, Centro, Puerto Montt, Los Lagos, Chile"
    assert with_number[3]["q"] == "Egaña, Puerto Montt, Chile"

    assert len(client.candidate_queries("Egaña")) == 2


def test_html_rate_limit_page_counts_as_a_failed_candidate() -> None:
    client = _client(lambda request: httpx.Response(200, text="<html>rate limited</html>"))

    with pytest.raises(ConnectionError):
        client.geocode("Angelmó", "1500")


def test_html_page_on_one_candidate_falls_through_to_the_next() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if "q" in request.url.params:
            return httpx.Response(200, json=[_record(-41.48, -72.95)])
        return httpx.Response(200, text="<html>rate limited</html>")

    result = _client(handler).geocode("Angelmó", "1500")

    assert result is not None
    assert result.precision == "road"
