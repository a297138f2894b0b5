import logging

from models.finance import Transaction, TransactionKind
from repositories.base_repository import delete_row, fetch_rows, insert_row, new_row_id, update_row
from utils.dates import normalize_date, parse_iso_date
from utils.money import parse_money_or_zero

TABLE = "transacoes"

# Transaction field -> sheet column
COLUMNS = {
    "date": "data",
    "kind": "tipo",
    "description": "descricao",
    "amount": "valor",
    "category": "categoria",
    "payment_method": "forma_pagamento",
    "note": "observacao",
}

# -----------------------------
# Transactions Repository
# -----------------------------

def row_to_transaction(row):
    """
    Map a ``transacoes`` row to a Transaction.
    Raises ValueError for rows without a usable date or type.
    """
    return Transaction(
        id=str(row.get("id") or ""),
        date=parse_iso_date(normalize_date(row.get("data"))),
        kind=TransactionKind(row.get("tipo")),
        description=str(row.get("descricao") or ""),
        amount=parse_money_or_zero(row.get("valor")),
        category=str(row.get("categoria") or ""),
        payment_method=str(row.get("forma_pagamento") or ""),
        note=str(row.get("observacao") or ""),
    )


def get_all_transactions(conn):
    """
    Returns all parseable transactions, newest first.
    Rows that cannot be parsed are logged and skipped.
    """
    transactions = []
    for row in fetch_rows(conn, TABLE):
        try:
            transactions.append(row_to_transaction(row))
        except ValueError as e:
            logging.warning(f"Skipping transaction row {row.get('id')!r}: {e}")
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def insert_transaction(conn, date, kind, description, amount, category,
                       payment_method="", note=""):
    """
    Inserts a transaction row and returns its generated id.
    - date: ISO string or date
    - kind: TransactionKind
    """
    row_id = new_row_id()
    insert_row(conn, TABLE, {
        "id": row_id,
        "data": str(date),
        "tipo": TransactionKind(kind).value,
        "descricao": description.strip(),
        "valor": amount,
        "categoria": category.strip(),
        "forma_pagamento": payment_method,
        "observacao": note,
    })
    return row_id


def delete_transaction(conn, transaction_id):
    return delete_row(conn, TABLE, transaction_id)


def update_transaction(conn, transaction_id, changes):
    """
    Update some fields of a transaction. Returns False if it doesn't exist.
    - changes: dict keyed by Transaction field name (date, kind, amount, ...)
    """
    row = {}
    for name, value in changes.items():
        if name not in COLUMNS:
            raise ValueError(f"unknown transaction field: {name}")
        if name == "kind":
            value = TransactionKind(value).value
        elif name in ("description", "category"):
            value = value.strip()
        row[COLUMNS[name]] = value
    return update_row(conn, TABLE, transaction_id, row)
