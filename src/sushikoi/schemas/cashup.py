"""Cash shift (cashup) models."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

PaymentMethodKey = Literal[
    "EFECTIVO_SISTEMA",
    "DEBITO_SISTEMA",
    "CREDITO_SISTEMA",
    "POS_DEBITO",
    "POS_CREDITO",
    "TRANSFERENCIA",
    "MERCADO_PAGO",
]

PAYMENT_METHOD_KEYS: tuple[str, ...] = (
    "EFECTIVO_SISTEMA",
    "DEBITO_SISTEMA",
    "CREDITO_SISTEMA",
    "POS_DEBITO",
    "POS_CREDITO",
    "TRANSFERENCIA",
    "MERCADO_PAGO",
)


class CashDenominationLine(BaseModel):
    denom: int
    qty: int = Field(0, ge=0)
    total: int
    kind: Literal["BILL", "COIN"]


class CashCount(BaseModel):
    lines: List[CashDenominationLine] = Field(default_factory=list)
    counted_total: int = 0


class ExpenseLine(BaseModel):
    id: str
    created_at: int
    concept: str
    category: str = "Otro"
    amount: int = Field(..., ge=0)
    note: Optional[str] = None
    by_user: Optional[str] = None


class TipsBreakdown(BaseModel):
    cash_tips: int = 0
    electronic_tips: int = 0
    distribution_note: Optional[str] = None


class SalesTotals(BaseModel):
    by_method: Dict[str, int] = Field(default_factory=lambda: {key: 0 for key in PAYMENT_METHOD_KEYS})
    expected_cash_in_drawer: int = 0


class ShiftOpen(BaseModel):
    started_at: int
    cashier_name: str
    opening_float: int = Field(..., ge=0)
    note: Optional[str] = None


class ShiftOps(BaseModel):
    expenses: List[ExpenseLine] = Field(default_factory=list)
    withdrawals: int = 0
    tips: TipsBreakdown = Field(default_factory=TipsBreakdown)
    sales: SalesTotals = Field(default_factory=SalesTotals)


class ShiftClose(BaseModel):
    closed_at: int
    cash_count: CashCount
    pos_debit: int = 0
    pos_credit: int = 0
    transfers: int = 0
    tips: TipsBreakdown
    sales: SalesTotals
    expenses: List[ExpenseLine]
    withdrawals: int
    diff: int
    diff_reason: Optional[str] = None
    signed_by: Optional[str] = None


class ShiftSession(BaseModel):
    id: str
    status: Literal["OPEN", "CLOSED"] = "OPEN"
    open: ShiftOpen
    ops: ShiftOps = Field(default_factory=ShiftOps)
    close: Optional[ShiftClose] = None


class OpenShiftRequest(BaseModel):
    cashier_name: str = Field(..., min_length=1)
    opening_float: Optional[int] = Field(default=None, ge=0)
    note: Optional[str] = None


class ExpenseRequest(BaseModel):
    concept: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    category: str = "Otro"
    note: Optional[str] = None
    by_user: Optional[str] = None


class CloseShiftRequest(BaseModel):
    quantities: Dict[int, int] = Field(default_factory=dict, description="Denomination -> count.")
    pos_debit: int = 0
    pos_credit: int = 0
    transfers: int = 0
    diff_reason: Optional[str] = None
    signed_by: Optional[str] = None
