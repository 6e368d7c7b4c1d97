"""Display formatting helpers."""

from __future__ import annotations

import math
import re
from typing import Optional


def format_km(meters: float) -> str:
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    minutes = math.floor(seconds / 60 + 0.5)
    if minutes < 60:
        return f"{minutes} min"
    hours, remaining = divmod(minutes, 60)
    return f"{hours} h {remaining} min" if remaining else f"{hours} h"


def pad(value: int) -> str:
    return str(value).zfill(2)


def format_time_remaining(milliseconds: float) -> str:
    """MM:SS countdown, clamped at zero."""

    total_seconds = max(0, math.ceil(milliseconds / 1000))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{pad(minutes)}:{pad(seconds)}"


def short_code(order_id: int, length: int = 6) -> str:
    return str(order_id)[-length:]


def format_address(street: str, number: str, sector: Optional[str] = None) -> str:
    return ", ".join(part.strip() for part in (street, number, sector or "") if part and part.strip())


def normalize_phone(phone: Optional[str]) -> str:
    """Strip whitespace and dashes so phones compare equal across input styles."""

    return re.sub(r"[\s-]", "", phone or "")


def phone_key(phone: Optional[str]) -> str:
    """Digits only; used as the customer record id."""

    return re.sub(r"\D+", "", phone or "")


def clamp_percentage(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return max(0, min(100, math.floor(value + 0.5)))
