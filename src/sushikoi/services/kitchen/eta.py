"""Order ready-time estimation from kitchen station load.

Each station type is treated as a pool of parallel cooks: the minutes of work
waiting for a station are divided by the number of stations of that type
staffed in the current shift. The slowest station bounds the estimate, and no
quote goes below the minimum kitchen turnaround.
"""

from __future__ import annotations

import math
from datetime import datetime
from numbers import Real
from typing import Iterable, Optional, Sequence

from ...config import settings
from ...models.domain import CartLine, ShiftCapacity, Station, StationLoad
from .capacity import get_shift_capacity
from .stations import StationClassifier

DEFAULT_COOKING_MINUTES = 15
MIN_ETA_MINUTES = 15


def line_minutes(value: object, default: int = DEFAULT_COOKING_MINUTES) -> int:
    """Minutes a line keeps its station busy: default when unknown, never below one."""

    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        value = default
    # half-up rounding, matching how cooking times are entered at the till
    return max(1, math.floor(float(value) + 0.5))


def sum_load_by_station(
    cart: Iterable[CartLine],
    classifier: Optional[StationClassifier] = None,
    default_minutes: int = DEFAULT_COOKING_MINUTES,
) -> StationLoad:
    classifier = classifier or StationClassifier()
    cold = hot = 0
    for line in cart:
        minutes = line_minutes(line.cooking_time_minutes, default_minutes)
        if classifier.classify(line.item_id, line.name) is Station.HOT:
            hot += minutes
        else:
            cold += minutes
    return StationLoad(cold=cold, hot=hot)


def queue_load(
    active_queue: Iterable[Sequence[CartLine]],
    classifier: Optional[StationClassifier] = None,
    default_minutes: int = DEFAULT_COOKING_MINUTES,
) -> StationLoad:
    total = StationLoad()
    for cart in active_queue:
        total = total + sum_load_by_station(cart, classifier, default_minutes)
    return total


def compute_eta(
    active_queue: Iterable[Sequence[CartLine]],
    new_cart: Sequence[CartLine],
    now: Optional[datetime] = None,
    *,
    capacity: Optional[ShiftCapacity] = None,
    classifier: Optional[StationClassifier] = None,
    min_minutes: int = MIN_ETA_MINUTES,
    default_minutes: int = DEFAULT_COOKING_MINUTES,
) -> int:
    """Quote minutes until ``new_cart`` is ready given the orders already in the kitchen."""

    capacity = capacity or get_shift_capacity(now)
    total = queue_load(active_queue, classifier, default_minutes) + sum_load_by_station(
        new_cart, classifier, default_minutes
    )

    minutes_cold = math.ceil(total.cold / max(1, capacity.cold))
    minutes_hot = math.ceil(total.hot / max(1, capacity.hot))
    return max(min_minutes, minutes_cold, minutes_hot)


def compute_configured_eta(
    active_queue: Iterable[Sequence[CartLine]],
    new_cart: Sequence[CartLine],
    now: Optional[datetime] = None,
    classifier: Optional[StationClassifier] = None,
) -> int:
    """Same as :func:`compute_eta` with floors taken from the runtime settings."""

    return compute_eta(
        active_queue,
        new_cart,
        now,
        classifier=classifier,
        min_minutes=settings.min_eta_minutes,
        default_minutes=settings.default_cooking_minutes,
    )
