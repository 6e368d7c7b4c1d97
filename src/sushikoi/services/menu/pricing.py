"""Surcharges for protein swaps and extra vegetables."""

from __future__ import annotations

from typing import Optional

PROTEIN_ALIASES: dict[str, str] = {
    "sake": "salmon",
    "tako": "pulpo",
    "ebi": "camaron",
    "kani": "kanikama",
    "tori": "pollo",
}

VEG_OPTIONS: tuple[str, ...] = (
    "tomate",
    "pepino",
    "ciboulette",
    "choclo",
    "palmito",
    "palta",
    "champiñon",
    "verdura salteada",
)
VEG_EXTRA_FEE = 800

_PROTEIN_TIERS: dict[str, int] = {
    "pollo": 0,
    "kanikama": 0,
    "salmon": 1,
    "camaron": 1,
    "loco": 2,
    "pulpo": 2,
}
_STEP_FEES = {1: 2500, 2: 4000}


def resolve_protein(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    key = name.strip().lower()
    return PROTEIN_ALIASES.get(key, key)


def change_protein_fee(from_protein: Optional[str], to_protein: Optional[str]) -> int:
    """Fee for swapping proteins; swaps to the same or a cheaper tier are free."""

    source, target = resolve_protein(from_protein), resolve_protein(to_protein)
    if not source or not target or source == target:
        return 0
    delta = _PROTEIN_TIERS.get(target, 2) - _PROTEIN_TIERS.get(source, 2)
    if delta <= 0:
        return 0
    return _STEP_FEES.get(delta, _STEP_FEES[2])


def veg_extras_fee(extras: list[str]) -> int:
    return VEG_EXTRA_FEE * sum(1 for extra in extras if extra.strip().lower() in VEG_OPTIONS)
