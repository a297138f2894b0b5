from dataclasses import dataclass, field
from typing import List

from db import get_db
from models.finance import Bill, Category, Goal, GoalTransaction, RecurringTransaction, Transaction
from repositories.bills_repository import get_all_bills
from repositories.categories_repository import get_all_categories
from repositories.goals_repository import get_all_goals, get_goal_transactions
from repositories.recurring_repository import (
    delete_recurring as repo_delete_recurring,
    get_all_recurring,
    insert_recurring as repo_insert_recurring,
    set_active as repo_set_active,
)
from repositories.transactions_repository import (
    delete_transaction as repo_delete_transaction,
    get_all_transactions as repo_get_all_transactions,
    insert_transaction as repo_insert_transaction,
    update_transaction as repo_update_transaction,
)
from services.sync_service import push_local_changes


@dataclass
class FinanceSnapshot:
    """Everything the forecast and balance computations read, loaded at once."""
    transactions: List[Transaction] = field(default_factory=list)
    recurring: List[RecurringTransaction] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)
    goal_transactions: List[GoalTransaction] = field(default_factory=list)
    bills: List[Bill] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


def load_snapshot():
    """Read every table through one connection opened on the caller's behalf."""
    conn = get_db()
    try:
        return FinanceSnapshot(
            transactions=repo_get_all_transactions(conn),
            recurring=get_all_recurring(conn),
            goals=get_all_goals(conn),
            goal_transactions=get_goal_transactions(conn),
            bills=get_all_bills(conn),
            categories=get_all_categories(conn),
        )
    finally:
        conn.close()


def get_all_transactions():
    conn = get_db()
    try:
        return repo_get_all_transactions(conn)
    finally:
        conn.close()


def add_transaction(*, date, kind, description, amount, category,
                    payment_method="", note=""):
    """Service wrapper around repository insert. Returns the new id."""
    conn = get_db()
    try:
        result = repo_insert_transaction(
            conn,
            date=date,
            kind=kind,
            description=description,
            amount=amount,
            category=category,
            payment_method=payment_method,
            note=note,
        )
    finally:
        conn.close()
    push_local_changes()
    return result


def update_transaction(transaction_id, changes):
    """Partial update; ``changes`` is keyed by Transaction field name."""
    conn = get_db()
    try:
        result = repo_update_transaction(conn, transaction_id, changes)
    finally:
        conn.close()
    push_local_changes()
    return result


def delete_transaction(transaction_id):
    conn = get_db()
    try:
        result = repo_delete_transaction(conn, transaction_id)
    finally:
        conn.close()
    push_local_changes()
    return result


def get_recurring_transactions():
    conn = get_db()
    try:
        return get_all_recurring(conn)
    finally:
        conn.close()


def add_recurring_transaction(*, kind, description, amount, category, start_date,
                              period, duration_months=None, payment_method="", note=""):
    conn = get_db()
    try:
        result = repo_insert_recurring(
            conn,
            kind=kind,
            description=description,
            amount=amount,
            category=category,
            start_date=start_date,
            period=period,
            duration_months=duration_months,
            payment_method=payment_method,
            note=note,
        )
    finally:
        conn.close()
    push_local_changes()
    return result


def set_recurring_active(recurring_id, active):
    conn = get_db()
    try:
        result = repo_set_active(conn, recurring_id, active)
    finally:
        conn.close()
    push_local_changes()
    return result


def delete_recurring_transaction(recurring_id):
    conn = get_db()
    try:
        result = repo_delete_recurring(conn, recurring_id)
    finally:
        conn.close()
    push_local_changes()
    return result
