"""Chilean RUT (tax id) cleaning, check digit and formatting."""

from __future__ import annotations

import re
from typing import Optional

_NON_RUT_CHARS = re.compile(r"[^0-9K]")


def clean_rut(rut: Optional[str]) -> str:
    return _NON_RUT_CHARS.sub("", (rut or "").upper())


def compute_dv(number: int) -> str:
    """Modulo 11 check digit; ``K`` stands for 10."""

    multiplier, total = 0, 1
    while number:
        total = (total + (number % 10) * (9 - multiplier % 6)) % 11
        multiplier += 1
        number //= 10
    return str(total - 1) if total else "K"


def validate_rut(rut: Optional[str]) -> bool:
    raw = clean_rut(rut)
    if len(raw) < 2:
        return False
    body, dv = raw[:-1], raw[-1]
    if not body.isdigit():
        return False
    return compute_dv(int(body)) == dv


def format_rut(rut: Optional[str]) -> str:
    """Format as ``12.345.678-5``; input is cleaned first."""

    raw = clean_rut(rut)
    if len(raw) < 2:
        return raw
    body, dv = raw[:-1], raw[-1]
    with_dots = re.sub(r"\B(?=(\d{3})+(?!\d))", ".", body)
    return f"{with_dots}-{dv}"
