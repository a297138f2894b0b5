from db import get_db
from repositories.goals_repository import (
    delete_goal as repo_delete_goal,
    delete_goal_transaction as repo_delete_goal_transaction,
    get_all_goals,
    get_goal_transactions,
    insert_goal as repo_insert_goal,
    insert_goal_transaction as repo_insert_goal_transaction,
    set_current_amount,
    update_goal as repo_update_goal,
)
from services.summary_service import goal_current_amount, goal_progress
from services.sync_service import push_local_changes


def _refresh_current_amount(conn, goal_id):
    current = goal_current_amount(goal_id, get_goal_transactions(conn, goal_id))
    set_current_amount(conn, goal_id, current)


def list_goal_progress():
    conn = get_db()
    try:
        return goal_progress(get_all_goals(conn), get_goal_transactions(conn))
    finally:
        conn.close()


def add_goal(*, name, target, deadline=None, color=""):
    conn = get_db()
    try:
        goal_id = repo_insert_goal(conn, name=name, target=target, deadline=deadline, color=color)
    finally:
        conn.close()
    push_local_changes()
    return goal_id


def update_goal(goal_id, changes):
    conn = get_db()
    try:
        result = repo_update_goal(conn, goal_id, changes)
    finally:
        conn.close()
    push_local_changes()
    return result


def delete_goal(goal_id):
    conn = get_db()
    try:
        result = repo_delete_goal(conn, goal_id)
    finally:
        conn.close()
    push_local_changes()
    return result


def list_goal_transactions(goal_id):
    conn = get_db()
    try:
        return get_goal_transactions(conn, goal_id)
    finally:
        conn.close()


def add_goal_transaction(*, goal_id, kind, amount, date, note=""):
    """
    Record a deposit or withdrawal and refresh the goal's stored current amount.
    Returns the movement id, or None when the goal doesn't exist.
    """
    conn = get_db()
    try:
        if goal_id not in {g.id for g in get_all_goals(conn)}:
            return None
        movement_id = repo_insert_goal_transaction(conn, goal_id, kind, amount, date, note)
        _refresh_current_amount(conn, goal_id)
    finally:
        conn.close()
    push_local_changes()
    return movement_id


def delete_goal_transaction(goal_id, movement_id):
    conn = get_db()
    try:
        if movement_id not in {m.id for m in get_goal_transactions(conn, goal_id)}:
            return False
        repo_delete_goal_transaction(conn, movement_id)
        _refresh_current_amount(conn, goal_id)
    finally:
        conn.close()
    push_local_changes()
    return True
