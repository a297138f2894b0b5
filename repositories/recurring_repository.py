import logging

from models.finance import (
    AfterMonths,
    RecurrencePeriod,
    RecurringTransaction,
    TransactionKind,
    UntilCancelled,
    end_policy_from_row,
    end_policy_to_row,
)
from repositories.base_repository import delete_row, fetch_rows, insert_row, new_row_id, update_row
from utils.dates import normalize_date, parse_iso_date
from utils.money import parse_money_or_zero

TABLE = "transacoes_recorrentes"

# -----------------------------
# Recurring Transactions Repository
# -----------------------------

def _parse_duration(raw):
    raw = str(raw or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def row_to_recurring(row):
    """
    Map a ``transacoes_recorrentes`` row to a RecurringTransaction.
    Unknown ``recorrencia`` values raise ValueError, so such rows never
    reach the forecast.
    """
    return RecurringTransaction(
        id=str(row.get("id") or ""),
        kind=TransactionKind(row.get("tipo")),
        description=str(row.get("descricao") or ""),
        amount=parse_money_or_zero(row.get("valor")),
        category=str(row.get("categoria") or ""),
        start_date=parse_iso_date(normalize_date(row.get("data_inicio"))),
        period=RecurrencePeriod.parse(row.get("recorrencia")),
        end_policy=end_policy_from_row(row.get("fim_tipo"), _parse_duration(row.get("meses_duracao"))),
        active=str(row.get("ativo") or "true").strip().lower() == "true",
        payment_method=str(row.get("forma_pagamento") or ""),
        note=str(row.get("observacao") or ""),
    )


def get_all_recurring(conn):
    """
    Returns recurring transactions in sheet order (inactive ones included).
    """
    definitions = []
    for row in fetch_rows(conn, TABLE):
        try:
            definitions.append(row_to_recurring(row))
        except ValueError as e:
            logging.warning(f"Skipping recurring row {row.get('id')!r}: {e}")
    return definitions


def insert_recurring(conn, kind, description, amount, category, start_date,
                     period, duration_months=None, payment_method="", note=""):
    end_type, duration = end_policy_to_row(AfterMonths(duration_months) if duration_months else UntilCancelled())
    row_id = new_row_id()
    insert_row(conn, TABLE, {
        "id": row_id,
        "descricao": description.strip(),
        "tipo": TransactionKind(kind).value,
        "valor": amount,
        "categoria": category.strip(),
        "forma_pagamento": payment_method,
        "data_inicio": str(start_date),
        "recorrencia": RecurrencePeriod.parse(period).value,
        "fim_tipo": end_type,
        "meses_duracao": duration,
        "ativo": True,
        "observacao": note,
    })
    return row_id


def set_active(conn, recurring_id, active):
    return update_row(conn, TABLE, recurring_id, {"ativo": bool(active)})


def delete_recurring(conn, recurring_id):
    return delete_row(conn, TABLE, recurring_id)
