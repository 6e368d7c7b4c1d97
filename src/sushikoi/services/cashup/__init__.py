"""Cash shift management."""

from .store import SESSIONS_DOCUMENT, CashupStore, ShiftStateError, count_cash, expected_cash

__all__ = ["SESSIONS_DOCUMENT", "CashupStore", "ShiftStateError", "count_cash", "expected_cash"]
