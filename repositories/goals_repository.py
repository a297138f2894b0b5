import logging

from models.finance import Goal, GoalTransaction, GoalTransactionKind
from repositories.base_repository import delete_row, fetch_rows, insert_row, new_row_id, update_row
from utils.dates import normalize_date, parse_iso_date
from utils.money import parse_money_or_zero

GOALS_TABLE = "metas"
MOVEMENTS_TABLE = "movimentacoes_metas"

# Goal field -> sheet column
GOAL_COLUMNS = {
    "name": "nome",
    "target": "valor_alvo",
    "deadline": "prazo",
    "color": "cor",
}

# -----------------------------
# Goals Repository
# -----------------------------

def row_to_goal(row):
    deadline = (row.get("prazo") or "").strip()
    return Goal(
        id=str(row.get("id") or ""),
        name=str(row.get("nome") or ""),
        target=parse_money_or_zero(row.get("valor_alvo")),
        deadline=parse_iso_date(normalize_date(deadline)) if deadline else None,
        color=str(row.get("cor") or ""),
    )


def row_to_goal_transaction(row):
    return GoalTransaction(
        id=str(row.get("id") or ""),
        goal_id=str(row.get("goal_id") or ""),
        kind=GoalTransactionKind(row.get("tipo")),
        amount=parse_money_or_zero(row.get("valor")),
        date=parse_iso_date(normalize_date(row.get("data"))),
        note=str(row.get("observacao") or ""),
    )


def get_all_goals(conn):
    goals = []
    for row in fetch_rows(conn, GOALS_TABLE):
        try:
            goals.append(row_to_goal(row))
        except ValueError as e:
            logging.warning(f"Skipping goal row {row.get('id')!r}: {e}")
    return goals


def get_goal_transactions(conn, goal_id=None):
    """
    Returns goal movements, newest first.
    - goal_id: optional, if None returns movements of every goal
    """
    movements = []
    for row in fetch_rows(conn, MOVEMENTS_TABLE):
        if goal_id is not None and str(row.get("goal_id")) != goal_id:
            continue
        try:
            movements.append(row_to_goal_transaction(row))
        except ValueError as e:
            logging.warning(f"Skipping goal movement row {row.get('id')!r}: {e}")
    return sorted(movements, key=lambda m: m.date, reverse=True)


def insert_goal_transaction(conn, goal_id, kind, amount, date, note=""):
    row_id = new_row_id()
    insert_row(conn, MOVEMENTS_TABLE, {
        "id": row_id,
        "goal_id": goal_id,
        "tipo": GoalTransactionKind(kind).value,
        "valor": amount,
        "data": str(date),
        "observacao": note,
    })
    return row_id


def delete_goal_transaction(conn, movement_id):
    return delete_row(conn, MOVEMENTS_TABLE, movement_id)


def insert_goal(conn, name, target, deadline=None, color=""):
    row_id = new_row_id()
    insert_row(conn, GOALS_TABLE, {
        "id": row_id,
        "nome": name.strip(),
        "valor_alvo": target,
        "valor_atual": 0,
        "prazo": str(deadline) if deadline else "",
        "cor": color,
    })
    return row_id


def update_goal(conn, goal_id, changes):
    """
    Update some fields of a goal. Returns False if it doesn't exist.
    - changes: dict keyed by Goal field name (name, target, deadline, color)
    """
    row = {}
    for name, value in changes.items():
        if name not in GOAL_COLUMNS:
            raise ValueError(f"unknown goal field: {name}")
        if name == "deadline":
            value = str(value) if value else ""
        row[GOAL_COLUMNS[name]] = value
    return update_row(conn, GOALS_TABLE, goal_id, row)


def set_current_amount(conn, goal_id, amount):
    # valor_atual is derived from the movements; kept in the sheet for its readers
    return update_row(conn, GOALS_TABLE, goal_id, {"valor_atual": amount})


def delete_goal(conn, goal_id):
    return delete_row(conn, GOALS_TABLE, goal_id)
