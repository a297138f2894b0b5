from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Optional

from models.finance import RecurrencePeriod, TransactionKind
from services.forecast_dto import recurring_to_dict, to_dict
from services.transaction_service import (
    add_recurring_transaction,
    add_transaction,
    delete_recurring_transaction,
    delete_transaction,
    get_all_transactions,
    get_recurring_transactions,
    set_recurring_active,
    update_transaction,
)
from utils.dates import parse_iso_date

router = APIRouter()


class TransactionCreate(BaseModel):
    date: str
    kind: TransactionKind
    description: str
    amount: float = Field(ge=0)
    category: str
    payment_method: str = ""
    note: str = ""


class TransactionUpdate(BaseModel):
    date: Optional[str] = None
    kind: Optional[TransactionKind] = None
    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    payment_method: Optional[str] = None
    note: Optional[str] = None


class RecurringCreate(BaseModel):
    kind: TransactionKind
    description: str
    amount: float = Field(ge=0)
    category: str
    start_date: str
    period: str
    duration_months: Optional[int] = Field(default=None, ge=1)
    payment_method: str = ""
    note: str = ""


class ActiveUpdate(BaseModel):
    active: bool


# -------------------------
# TRANSACTIONS
# -------------------------

@router.get("/transactions")
def list_transactions():
    return {"transactions": [to_dict(t) for t in get_all_transactions()]}


@router.post("/transactions")
def create_transaction(txn: TransactionCreate):
    try:
        tx_date = parse_iso_date(txn.date)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    transaction_id = add_transaction(
        date=tx_date.isoformat(),
        kind=txn.kind,
        description=txn.description,
        amount=txn.amount,
        category=txn.category,
        payment_method=txn.payment_method,
        note=txn.note,
    )
    return {"success": True, "id": transaction_id}


@router.put("/transactions/{transaction_id}")
def edit_transaction(transaction_id: str, txn: TransactionUpdate):
    changes = txn.model_dump(exclude_unset=True, exclude_none=True)
    if "date" in changes:
        try:
            changes["date"] = parse_iso_date(changes["date"]).isoformat()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    return {"success": update_transaction(transaction_id, changes)}


@router.delete("/transactions/{transaction_id}")
def remove_transaction(transaction_id: str):
    return {"success": delete_transaction(transaction_id)}


# -------------------------
# RECURRING TRANSACTIONS
# -------------------------

@router.get("/recurring")
def list_recurring():
    return {"recurring": [recurring_to_dict(r) for r in get_recurring_transactions()]}


@router.post("/recurring")
def create_recurring(rt: RecurringCreate):
    try:
        start = parse_iso_date(rt.start_date)
        period = RecurrencePeriod.parse(rt.period)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    recurring_id = add_recurring_transaction(
        kind=rt.kind,
        description=rt.description,
        amount=rt.amount,
        category=rt.category,
        start_date=start.isoformat(),
        period=period,
        duration_months=rt.duration_months,
        payment_method=rt.payment_method,
        note=rt.note,
    )
    return {"success": True, "id": recurring_id}


@router.post("/recurring/{recurring_id}/active")
def update_recurring_active(recurring_id: str, update: ActiveUpdate):
    return {"success": set_recurring_active(recurring_id, update.active)}


@router.delete("/recurring/{recurring_id}")
def remove_recurring(recurring_id: str):
    return {"success": delete_recurring_transaction(recurring_id)}
