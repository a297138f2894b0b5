from datetime import date
from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Optional

from models.finance import BillKind
from services.bill_service import add_bill, delete_bill, list_bills, set_bill_paid, update_bill
from services.forecast_dto import to_dict
from utils.dates import parse_iso_date

router = APIRouter()


class BillCreate(BaseModel):
    kind: BillKind
    description: str
    amount: float = Field(ge=0)
    category: str
    due_date: Optional[str] = None
    note: str = ""


class BillUpdate(BaseModel):
    kind: Optional[BillKind] = None
    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    due_date: Optional[str] = None
    note: Optional[str] = None


class BillPayment(BaseModel):
    paid: bool = True
    paid_date: Optional[str] = None  # defaults to today


@router.get("/bills")
def get_bills():
    return {"bills": [to_dict(b) for b in list_bills()]}


@router.post("/bills")
def create_bill(bill: BillCreate):
    due = None
    if bill.due_date:
        try:
            due = parse_iso_date(bill.due_date).isoformat()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    bill_id = add_bill(
        kind=bill.kind,
        description=bill.description,
        amount=bill.amount,
        category=bill.category,
        due_date=due,
        note=bill.note,
    )
    return {"success": True, "id": bill_id}


@router.put("/bills/{bill_id}")
def edit_bill(bill_id: str, bill: BillUpdate):
    changes = bill.model_dump(exclude_unset=True, exclude_none=True)
    if changes.get("due_date"):
        try:
            changes["due_date"] = parse_iso_date(changes["due_date"]).isoformat()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    return {"success": update_bill(bill_id, changes)}


@router.post("/bills/{bill_id}/pay")
def pay_bill(bill_id: str, payment: BillPayment):
    """
    Mark a bill paid (on ``paid_date``, default today) or, with
    ``paid=false``, back to open.
    """
    paid_on = None
    if payment.paid:
        try:
            paid_on = parse_iso_date(payment.paid_date) if payment.paid_date else date.today()
        except ValueError as e:
            return {"success": False, "error": str(e)}

    return {"success": set_bill_paid(bill_id, paid_on.isoformat() if paid_on else None)}


@router.delete("/bills/{bill_id}")
def remove_bill(bill_id: str):
    return {"success": delete_bill(bill_id)}
