"""Navigation deep links for drivers."""

from __future__ import annotations

from urllib.parse import quote

from ..config import settings


def gmaps_dir(dest_lat: float, dest_lng: float) -> str:
    return (
        "https://www.google.com/maps/dir/"
        f"{settings.store_latitude},{settings.store_longitude}/{dest_lat},{dest_lng}"
    )


def waze_url(dest_lat: float, dest_lng: float) -> str:
    return f"https://waze.com/ul?ll={dest_lat},{dest_lng}&navigate=yes"


def waze_qr_url(dest_lat: float, dest_lng: float, size: int = 180) -> str:
    return (
        f"https://api.qrserver.com/v1/create-qr-code/?size={size}x{size}"
        f"&data={quote(waze_url(dest_lat, dest_lng), safe='')}"
    )
