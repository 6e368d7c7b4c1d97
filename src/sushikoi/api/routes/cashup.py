"""Cash shift endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.cashup import CloseShiftRequest, ExpenseRequest, OpenShiftRequest, ShiftSession
from ...services.cashup import CashupStore, ShiftStateError
from ..dependencies import get_cashup_store

router = APIRouter(prefix="/cashup", tags=["cashup"])


@router.get("/sessions", response_model=List[ShiftSession], status_code=status.HTTP_200_OK)
def list_sessions(store: CashupStore = Depends(get_cashup_store)) -> List[ShiftSession]:
    return store.list_sessions()


@router.get("/current", response_model=Optional[ShiftSession], status_code=status.HTTP_200_OK)
def current_session(store: CashupStore = Depends(get_cashup_store)) -> Optional[ShiftSession]:
    return store.current()


@router.post("/open", response_model=ShiftSession, status_code=status.HTTP_201_CREATED)
def open_shift(payload: OpenShiftRequest, store: CashupStore = Depends(get_cashup_store)) -> ShiftSession:
    try:
        return store.open_shift(payload.cashier_name, payload.opening_float, payload.note)
    except ShiftStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/expenses", response_model=ShiftSession, status_code=status.HTTP_200_OK)
def add_expense(payload: ExpenseRequest, store: CashupStore = Depends(get_cashup_store)) -> ShiftSession:
    try:
        return store.add_expense(
            payload.concept,
            payload.amount,
            category=payload.category,
            note=payload.note,
            by_user=payload.by_user,
        )
    except ShiftStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.post("/close", response_model=ShiftSession, status_code=status.HTTP_200_OK)
def close_shift(payload: CloseShiftRequest, store: CashupStore = Depends(get_cashup_store)) -> ShiftSession:
    try:
        return store.close_shift(
            payload.quantities,
            pos_debit=payload.pos_debit,
            pos_credit=payload.pos_credit,
            transfers=payload.transfers,
            diff_reason=payload.diff_reason,
            signed_by=payload.signed_by,
        )
    except ShiftStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
