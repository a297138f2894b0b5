from db import get_db
from repositories.bills_repository import (
    delete_bill as repo_delete_bill,
    get_all_bills,
    insert_bill as repo_insert_bill,
    mark_paid as repo_mark_paid,
    update_bill as repo_update_bill,
)
from services.sync_service import push_local_changes


def list_bills():
    conn = get_db()
    try:
        return get_all_bills(conn)
    finally:
        conn.close()


def add_bill(*, kind, description, amount, category, due_date=None, note=""):
    conn = get_db()
    try:
        bill_id = repo_insert_bill(
            conn,
            kind=kind,
            description=description,
            amount=amount,
            category=category,
            due_date=due_date,
            note=note,
        )
    finally:
        conn.close()
    push_local_changes()
    return bill_id


def update_bill(bill_id, changes):
    conn = get_db()
    try:
        result = repo_update_bill(conn, bill_id, changes)
    finally:
        conn.close()
    push_local_changes()
    return result


def set_bill_paid(bill_id, paid_date):
    """``paid_date=None`` reopens the bill."""
    conn = get_db()
    try:
        result = repo_mark_paid(conn, bill_id, paid_date)
    finally:
        conn.close()
    push_local_changes()
    return result


def delete_bill(bill_id):
    conn = get_db()
    try:
        result = repo_delete_bill(conn, bill_id)
    finally:
        conn.close()
    push_local_changes()
    return result
