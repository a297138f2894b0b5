import uuid

from db import PENDING_TABLE, SHEET_TABLES

# -----------------------------
# Raw sheet-row helpers
# -----------------------------
# insert_row/update_row/delete_row also queue the change so it can be
# pushed to the spreadsheet; replace_rows (used by sync) does not.

def new_row_id():
    return uuid.uuid4().hex


def fetch_rows(conn, table):
    """
    Return every row of a mirrored sheet table as a dict keyed by header.
    Missing cells come back as empty strings, like an unfilled sheet cell.
    """
    columns = SHEET_TABLES[table]
    result = conn.execute(f"SELECT {', '.join(columns)} FROM {table}")
    names = [col[0] for col in result.description]
    return [
        {name: ("" if value is None else value) for name, value in zip(names, row)}
        for row in result.fetchall()
    ]


def get_row(conn, table, row_id):
    """Return the row with ``id = row_id`` as a dict, or None."""
    columns = SHEET_TABLES[table]
    row = conn.execute(
        f"SELECT {', '.join(columns)} FROM {table} WHERE id = ?", (row_id,)
    ).fetchone()
    if row is None:
        return None
    return {name: ("" if value is None else value) for name, value in zip(columns, row)}


def insert_row(conn, table, row):
    columns = SHEET_TABLES[table]
    placeholders = ", ".join("?" for _ in columns)
    conn.execute(
        f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
        [_cell(row.get(col)) for col in columns]
    )
    queue_change(conn, table, _cell(row.get("id")), "insert")


def update_row(conn, table, row_id, changes):
    """Update the given columns of the row with ``id = row_id``. Returns False if absent."""
    if not row_exists(conn, table, row_id):
        return False
    columns = [col for col in changes if col in SHEET_TABLES[table] and col != "id"]
    if not columns:
        return True
    assignments = ", ".join(f"{col} = ?" for col in columns)
    conn.execute(
        f"UPDATE {table} SET {assignments} WHERE id = ?",
        [_cell(changes[col]) for col in columns] + [row_id]
    )
    queue_change(conn, table, row_id, "update")
    return True


def delete_row(conn, table, row_id):
    if not row_exists(conn, table, row_id):
        return False
    conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
    queue_change(conn, table, row_id, "delete")
    return True


def row_exists(conn, table, row_id):
    row = conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (row_id,)).fetchone()
    return bool(row)


def replace_rows(conn, table, rows):
    """Replace the full contents of ``table``. Caller owns the transaction."""
    columns = SHEET_TABLES[table]
    conn.execute(f"DELETE FROM {table}")
    if rows:
        placeholders = ", ".join("?" for _ in columns)
        conn.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
            [[_cell(row.get(col)) for col in columns] for row in rows]
        )


# -----------------------------
# Pending changes
# -----------------------------

def queue_change(conn, table, row_id, action):
    conn.execute(
        f"INSERT INTO {PENDING_TABLE} (table_name, row_id, action) VALUES (?, ?, ?)",
        (table, row_id, action)
    )


def pending_changes(conn):
    """Queued changes as dicts (seq, table_name, row_id, action), oldest first."""
    result = conn.execute(
        f"SELECT seq, table_name, row_id, action FROM {PENDING_TABLE} ORDER BY seq"
    )
    names = [col[0] for col in result.description]
    return [dict(zip(names, row)) for row in result.fetchall()]


def clear_change(conn, seq):
    conn.execute(f"DELETE FROM {PENDING_TABLE} WHERE seq = ?", (seq,))


def _cell(value):
    # sheets hold text; keep the same representation locally
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
