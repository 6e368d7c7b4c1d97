"""Kitchen station assignment for menu items."""

from __future__ import annotations

import re
from typing import Mapping, Optional

from ...models.domain import Station

# Best sellers are cold rolls even though some of them mention fried pieces.
POPULAR_COLD_PATTERN = re.compile(r"koi\s*1|koi\s*2|koi\s*2\.0")
HOT_PATTERN = re.compile(
    r"tempura|tenpura|frito|fried|breaded|acevichado|yakimeshi|salteado|sauteed|sautéed"
)


def classify_station(name: Optional[str]) -> Station:
    """Guess the station from the item name; the popular-SKU check runs first."""

    normalized = (name or "").lower()
    if POPULAR_COLD_PATTERN.search(normalized):
        return Station.COLD
    if HOT_PATTERN.search(normalized):
        return Station.HOT
    return Station.COLD


class StationClassifier:
    """Resolve stations from declared menu metadata, falling back to the name heuristic."""

    def __init__(self, overrides: Optional[Mapping[int, Station]] = None) -> None:
        self.overrides: dict[int, Station] = dict(overrides or {})

    def classify(self, item_id: Optional[int], name: Optional[str]) -> Station:
        if item_id is not None and item_id in self.overrides:
            return self.overrides[item_id]
        return classify_station(name)
