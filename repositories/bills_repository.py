import logging
from datetime import date

from models.finance import Bill, BillKind
from repositories.base_repository import delete_row, fetch_rows, insert_row, new_row_id, update_row
from utils.dates import normalize_date, parse_iso_date
from utils.money import parse_money_or_zero

TABLE = "contas"

# Bill field -> sheet column
COLUMNS = {
    "kind": "tipo",
    "description": "descricao",
    "amount": "valor",
    "category": "categoria",
    "due_date": "data_vencimento",
    "note": "observacao",
}

# -----------------------------
# Bills Repository
# -----------------------------

def _optional_date(raw):
    raw = (raw or "").strip()
    return parse_iso_date(normalize_date(raw)) if raw else None


def row_to_bill(row):
    return Bill(
        id=str(row.get("id") or ""),
        kind=BillKind(row.get("tipo")),
        description=str(row.get("descricao") or ""),
        amount=parse_money_or_zero(row.get("valor")),
        category=str(row.get("categoria") or ""),
        due_date=_optional_date(row.get("data_vencimento")),
        paid_date=_optional_date(row.get("data_pagamento")),
        paid=str(row.get("pago") or "false").strip().lower() == "true",
        note=str(row.get("observacao") or ""),
    )


def get_all_bills(conn):
    """
    Returns bills sorted by due date (undated last), then description.
    """
    bills = []
    for row in fetch_rows(conn, TABLE):
        try:
            bills.append(row_to_bill(row))
        except ValueError as e:
            logging.warning(f"Skipping bill row {row.get('id')!r}: {e}")
    return sorted(bills, key=lambda b: (b.due_date is None, b.due_date or date.min, b.description))


def insert_bill(conn, kind, description, amount, category, due_date=None, note=""):
    row_id = new_row_id()
    insert_row(conn, TABLE, {
        "id": row_id,
        "tipo": BillKind(kind).value,
        "descricao": description.strip(),
        "valor": amount,
        "categoria": category.strip(),
        "data_vencimento": str(due_date) if due_date else "",
        "data_pagamento": "",
        "pago": False,
        "observacao": note,
    })
    return row_id


def update_bill(conn, bill_id, changes):
    """
    Update some fields of a bill. Returns False if it doesn't exist.
    - changes: dict keyed by Bill field name; payment goes through mark_paid
    """
    row = {}
    for name, value in changes.items():
        if name not in COLUMNS:
            raise ValueError(f"unknown bill field: {name}")
        if name == "kind":
            value = BillKind(value).value
        elif name == "due_date":
            value = str(value) if value else ""
        row[COLUMNS[name]] = value
    return update_row(conn, TABLE, bill_id, row)


def mark_paid(conn, bill_id, paid_date):
    """
    Mark a bill paid on ``paid_date``, or back to open when it is None.
    """
    return update_row(conn, TABLE, bill_id, {
        "pago": paid_date is not None,
        "data_pagamento": str(paid_date) if paid_date else "",
    })


def delete_bill(conn, bill_id):
    return delete_row(conn, TABLE, bill_id)
