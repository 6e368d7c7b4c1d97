"""Chilean peso helpers."""

from __future__ import annotations

import math
import re
from typing import Union

Number = Union[int, float]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_thousands(value: int) -> str:
    """Group digits with dots the way es-CL does (``12.345``)."""

    sign = "-" if value < 0 else ""
    return sign + f"{abs(value):,}".replace(",", ".")


def clp(value: Number | None) -> str:
    """Render an amount as ``$12.345``; missing or non-finite amounts render as ``$0``."""

    amount = float(value or 0)
    if not math.isfinite(amount):
        amount = 0.0
    return f"${format_thousands(_round_half_up(amount))}"


def to_int(value: Union[str, Number, None]) -> int:
    """Parse user-entered amounts such as ``"$12.990"``; unparseable input gives 0."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _round_half_up(value) if math.isfinite(value) else 0
    digits = re.sub(r"[^\d-]", "", str(value if value is not None else ""))
    try:
        return int(digits)
    except ValueError:
        return 0
