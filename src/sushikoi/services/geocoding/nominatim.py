"""HTTP client for resolving customer addresses through Nominatim."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Literal, Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)

Precision = Literal["exact", "road", "fallback"]


@dataclass(frozen=True, slots=True)
class GeocodeResult:
    latitude: float
    longitude: float
    precision: Precision
    matched_number: bool = False

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


def build_free_text_query(street: str, number: str | None, sector: str | None, city: str) -> str:
    parts = [street]
    if number:
        parts.append(number)
    if sector and sector.strip():
        parts.append(sector)
    parts.extend([city, "Los Lagos", "Chile"])
    return ", ".join(parts)


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.nominatim_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Nominatim base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoder_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geocoder_backoff_seconds
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is not None:
            return self._client
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"Accept-Language": "es-CL", "User-Agent": settings.app_name},
        )

    def _base_params(self, *, bounded: bool = True) -> dict[str, str]:
        params = {
            "format": "jsonv2",
            "addressdetails": "1",
            "limit": "8",
            "countrycodes": settings.nominatim_country_codes,
            "dedupe": "1",
        }
        if bounded:
            params["bounded"] = "1"
            params["viewbox"] = settings.nominatim_viewbox
        return params

    def candidate_queries(
        self,
        street: str,
        number: str | None = None,
        sector: str | None = None,
        city: str | None = None,
    ) -> list[dict[str, str]]:
        """Structured searches first, then free text, then street + city."""

        city = city or settings.default_city
        candidates: list[dict[str, str]] = []
        if number:
            for street_value in (f"{number} {street}", street):
                params = self._base_params()
                params.update({"street": street_value, "city": city, "country": "Chile"})
                if sector and sector.strip():
                    params["county"] = sector
                candidates.append(params)

        free_text = self._base_params()
        free_text["q"] = build_free_text_query(street, number, sector, city)
        candidates.append(free_text)

        fallback = self._base_params()
        fallback["q"] = f"{street}, {city}, Chile"
        candidates.append(fallback)
        return candidates

    def search(self, params: dict[str, str]) -> list[dict]:
        """Run one search, retrying transient failures with exponential backoff."""

        url = f"{self.base_url}/search"
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    try:
                        data = response.json()
                    except ValueError as exc:
                        # Rate limiting answers 200 with an HTML page.
                        raise ConnectionError(f"Geocoding service at {self.base_url} returned a non-JSON body") from exc
                    return data if isinstance(data, list) else []
                except (httpx.TimeoutException, httpx.NetworkError) as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(f"Geocoding service at {self.base_url} is not reachable: {exc}") from exc
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Geocoder network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.HTTPStatusError as exc:
                    attempt += 1
                    if attempt > self.max_retries or exc.response.status_code < 500:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            if self._client is None:
                client.close()

    def geocode(
        self,
        street: str,
        number: str | None = None,
        sector: str | None = None,
        city: str | None = None,
    ) -> Optional[GeocodeResult]:
        street = (street or "").strip()
        number = (number or "").strip() or None
        if len(street) < 2:
            return None

        failures = 0
        candidates = self.candidate_queries(street, number, sector, city)
        for params in candidates:
            try:
                records = self.search(params)
            except (ConnectionError, httpx.HTTPError) as exc:
                failures += 1
                logger.warning(f"Geocoding request failed: {exc}")
                continue
            result = pick_best_match(records, street, number)
            if result is not None:
                return result
        if failures == len(candidates):
            raise ConnectionError(f"Geocoding service at {self.base_url} failed for every candidate query")
        return None


def _to_result(record: dict, precision: Precision, matched_number: bool = False) -> Optional[GeocodeResult]:
    try:
        lat = float(record["lat"])
        lon = float(record["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if lat != lat or lon != lon or abs(lat) == float("inf") or abs(lon) == float("inf"):
        return None
    return GeocodeResult(latitude=lat, longitude=lon, precision=precision, matched_number=matched_number)


def pick_best_match(records: list[dict], street: str, number: str | None) -> Optional[GeocodeResult]:
    """Prefer an exact house number, then a result on the same road, then the first hit."""

    if not records:
        return None
    if number:
        for record in records:
            address = record.get("address") or {}
            house_number = address.get("house_number") or address.get("housenumber")
            if house_number and str(house_number).strip() == number:
                result = _to_result(record, "exact", True)
                if result:
                    return result
    needle = street.lower()
    for record in records:
        road = str((record.get("address") or {}).get("road") or "").lower()
        if needle in road:
            result = _to_result(record, "road")
            if result:
                return result
    return _to_result(records[0], "fallback")
