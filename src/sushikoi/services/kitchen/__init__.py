"""Kitchen load and ready-time estimation."""

from .capacity import capacity_table, get_shift_capacity
from .eta import compute_configured_eta, compute_eta, line_minutes, queue_load, sum_load_by_station
from .stations import StationClassifier, classify_station

__all__ = [
    "StationClassifier",
    "capacity_table",
    "classify_station",
    "compute_configured_eta",
    "compute_eta",
    "get_shift_capacity",
    "line_minutes",
    "queue_load",
    "sum_load_by_station",
]
