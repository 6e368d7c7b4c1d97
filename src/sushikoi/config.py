"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
import math
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DELIVERY_ZONES: tuple[dict, ...] = (
    {"name": "Cerca", "radius_km": 2.0, "fee": 1500},
    {"name": "Media", "radius_km": 5.0, "fee": 2500},
    {"name": "Lejos", "radius_km": 8.0, "fee": 3500},
    {"name": "Extrema", "radius_km": None, "fee": 5000},
)

# Monday=0 .. Sunday=6. Mon-Thu and Fri-Sun shifts currently staff the same stations.
DEFAULT_SHIFT_CAPACITY: dict[int, dict[str, int]] = {
    day: {"cold": 2, "hot": 1} for day in range(7)
}


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="KOI_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Sushikoi Ordering API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for JSON stores.")

    store_name: str = "Sushikoi, Av. Capitán Ávalos 6130, Puerto Montt, Chile"
    store_latitude: float = Field(default=-41.46619826299714, ge=-90.0, le=90.0)
    store_longitude: float = Field(default=-72.99901571534275, ge=-180.0, le=180.0)
    delivery_zones: tuple[dict, ...] = Field(
        default=DEFAULT_DELIVERY_ZONES,
        description="Ordered fee tiers; a radius of null marks the unbounded catch-all.",
    )

    min_eta_minutes: int = Field(default=15, ge=0)
    default_cooking_minutes: int = Field(default=15, ge=1)
    shift_capacity: dict[int, dict[str, int]] = Field(
        default_factory=lambda: dict(DEFAULT_SHIFT_CAPACITY),
        description="Station counts per weekday (0=Monday).",
    )

    opening_float: int = Field(default=45000, ge=0, description="Default cash drawer float in CLP.")

    default_city: str = "Puerto Montt"
    nominatim_base_url: Optional[str] = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL for the Nominatim geocoding service.",
    )
    nominatim_viewbox: str = "-73.2,-41.7,-72.7,-41.3"
    nominatim_country_codes: str = "cl"
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_max_retries: int = Field(default=2, ge=0)
    geocoder_backoff_seconds: float = Field(default=0.5, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("delivery_zones", mode="before")
    @classmethod
    def _parse_zones_from_env(cls, value: Any) -> tuple[dict, ...]:
        """Accept the zone table as a JSON array of {name, radius_km, fee} objects."""
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, (list, tuple)):
            raise ValueError("delivery_zones must be a list of zone objects.")
        zones = tuple(dict(item) for item in value)
        if not zones:
            raise ValueError("delivery_zones must contain at least one zone.")
        previous = -math.inf
        for zone in zones:
            if "name" not in zone or "fee" not in zone:
                raise ValueError("every delivery zone needs a name and a fee.")
            radius = zone.get("radius_km")
            radius = math.inf if radius is None else float(radius)
            if radius <= previous:
                raise ValueError(f"delivery zone radii must be strictly increasing (offending zone '{zone['name']}').")
            previous = radius
        if not math.isinf(previous):
            raise ValueError("the last delivery zone must be unbounded (radius_km null).")
        return zones

    @field_validator("shift_capacity", mode="before")
    @classmethod
    def _parse_capacity_from_env(cls, value: Any) -> dict[int, dict[str, int]]:
        """Accept a JSON object keyed by weekday number; missing days keep the default."""
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, dict):
            raise ValueError("shift_capacity must be a mapping of weekday to station counts.")
        merged = dict(DEFAULT_SHIFT_CAPACITY)
        for day, counts in value.items():
            merged[int(day)] = {"cold": int(counts["cold"]), "hot": int(counts["hot"])}
        return merged


settings = Settings()
