"""Cash shift sessions: open, record drawer movements, count and close."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Mapping, Optional

from ...config import settings
from ...persistence.filesystem import FileStorage
from ...schemas.cashup import (
    PAYMENT_METHOD_KEYS,
    CashCount,
    CashDenominationLine,
    ExpenseLine,
    ShiftClose,
    ShiftOpen,
    ShiftSession,
)

SESSIONS_DOCUMENT = "cashup.sessions.v1"

BILL_DENOMINATIONS = (20000, 10000, 5000, 2000, 1000)
COIN_DENOMINATIONS = (500, 100, 50, 10)

logger = logging.getLogger(__name__)


class ShiftStateError(ValueError):
    """Raised when an operation does not fit the current shift state."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def count_cash(quantities: Mapping[int, int]) -> CashCount:
    """Build a drawer count from ``{denomination: quantity}``; unknown denominations are rejected."""

    lines: list[CashDenominationLine] = []
    for denom in (*BILL_DENOMINATIONS, *COIN_DENOMINATIONS):
        qty = int(quantities.get(denom, 0) or 0)
        if qty < 0:
            raise ValueError(f"negative quantity for denomination {denom}")
        kind = "BILL" if denom in BILL_DENOMINATIONS else "COIN"
        lines.append(CashDenominationLine(denom=denom, qty=qty, total=denom * qty, kind=kind))
    unknown = set(int(denom) for denom in quantities) - set(BILL_DENOMINATIONS) - set(COIN_DENOMINATIONS)
    if unknown:
        raise ValueError(f"unknown denominations: {sorted(unknown)}")
    return CashCount(lines=lines, counted_total=sum(line.total for line in lines))


def expected_cash(session: ShiftSession) -> int:
    """Float plus cash sales and cash tips, minus cash expenses and withdrawals."""

    ops = session.ops
    cash_sales = ops.sales.by_method.get("EFECTIVO_SISTEMA", 0)
    expenses = sum(expense.amount for expense in ops.expenses)
    return session.open.opening_float + cash_sales + ops.tips.cash_tips - expenses - ops.withdrawals


class CashupStore:
    def __init__(self, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()

    def list_sessions(self) -> list[ShiftSession]:
        raw = self.storage.read_json(SESSIONS_DOCUMENT, default=[])
        return [ShiftSession.model_validate(entry) for entry in raw]

    def _save(self, sessions: list[ShiftSession]) -> None:
        self.storage.write_json(SESSIONS_DOCUMENT, [session.model_dump(mode="json") for session in sessions])

    def current(self) -> Optional[ShiftSession]:
        for session in self.list_sessions():
            if session.status == "OPEN":
                return session
        return None

    def _require_open(self) -> tuple[list[ShiftSession], int]:
        sessions = self.list_sessions()
        for index, session in enumerate(sessions):
            if session.status == "OPEN":
                return sessions, index
        raise ShiftStateError("no open shift")

    def open_shift(
        self,
        cashier_name: str,
        opening_float: Optional[int] = None,
        note: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> ShiftSession:
        if self.current() is not None:
            raise ShiftStateError("a shift is already open")
        session = ShiftSession(
            id=uuid.uuid4().hex,
            open=ShiftOpen(
                started_at=now_ms or _now_ms(),
                cashier_name=cashier_name,
                opening_float=settings.opening_float if opening_float is None else opening_float,
                note=note,
            ),
        )
        self._save([*self.list_sessions(), session])
        logger.info(f"Shift {session.id} opened by {cashier_name}")
        return session

    def _update_current(self, mutate) -> ShiftSession:
        sessions, index = self._require_open()
        session = sessions[index]
        mutate(session)
        session.ops.sales.expected_cash_in_drawer = expected_cash(session)
        self._save(sessions)
        return session

    def add_expense(
        self,
        concept: str,
        amount: int,
        *,
        category: str = "Otro",
        note: Optional[str] = None,
        by_user: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> ShiftSession:
        expense = ExpenseLine(
            id=uuid.uuid4().hex,
            created_at=now_ms or _now_ms(),
            concept=concept,
            category=category,
            amount=amount,
            note=note,
            by_user=by_user,
        )
        return self._update_current(lambda session: session.ops.expenses.append(expense))

    def add_withdrawal(self, amount: int) -> ShiftSession:
        if amount < 0:
            raise ValueError("withdrawal amount must be >= 0")

        def apply(session: ShiftSession) -> None:
            session.ops.withdrawals += amount

        return self._update_current(apply)

    def add_cash_tip(self, amount: int) -> ShiftSession:
        if amount < 0:
            raise ValueError("tip amount must be >= 0")

        def apply(session: ShiftSession) -> None:
            session.ops.tips.cash_tips += amount

        return self._update_current(apply)

    def register_sale(self, method: str, amount: int) -> ShiftSession:
        if method not in PAYMENT_METHOD_KEYS:
            raise ValueError(f"unknown payment method '{method}'")
        if amount < 0:
            raise ValueError("sale amount must be >= 0")

        def apply(session: ShiftSession) -> None:
            by_method = session.ops.sales.by_method
            by_method[method] = by_method.get(method, 0) + amount

        return self._update_current(apply)

    def close_shift(
        self,
        quantities: Mapping[int, int],
        *,
        pos_debit: int = 0,
        pos_credit: int = 0,
        transfers: int = 0,
        diff_reason: Optional[str] = None,
        signed_by: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> ShiftSession:
        """Count the drawer and close the open shift; ``diff`` is counted minus expected."""

        sessions, index = self._require_open()
        session = sessions[index]
        cash_count = count_cash(quantities)
        expected = expected_cash(session)
        session.ops.sales.expected_cash_in_drawer = expected
        session.close = ShiftClose(
            closed_at=now_ms or _now_ms(),
            cash_count=cash_count,
            pos_debit=pos_debit,
            pos_credit=pos_credit,
            transfers=transfers,
            tips=session.ops.tips,
            sales=session.ops.sales,
            expenses=list(session.ops.expenses),
            withdrawals=session.ops.withdrawals,
            diff=cash_count.counted_total - expected,
            diff_reason=diff_reason,
            signed_by=signed_by,
        )
        session.status = "CLOSED"
        self._save(sessions)
        logger.info(f"Shift {session.id} closed, diff={session.close.diff}")
        return session
