"""Shift capacity lookup by weekday."""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional

from ...config import settings
from ...models.domain import ShiftCapacity


def capacity_table(raw: Optional[Mapping[int, Mapping[str, int]]] = None) -> dict[int, ShiftCapacity]:
    source = raw if raw is not None else settings.shift_capacity
    return {
        int(day): ShiftCapacity(cold=int(counts["cold"]), hot=int(counts["hot"]))
        for day, counts in source.items()
    }


def get_shift_capacity(
    now: Optional[datetime] = None,
    table: Optional[Mapping[int, ShiftCapacity]] = None,
) -> ShiftCapacity:
    """Return the stations staffed on the weekday of ``now`` (Monday=0)."""

    now = now or datetime.now()
    table = table if table is not None else capacity_table()
    # TODO: confirm Fri-Sun staffing with the kitchen; both shift blocks default to 2 cold / 1 hot.
    return table.get(now.weekday(), ShiftCapacity(cold=2, hot=1))
