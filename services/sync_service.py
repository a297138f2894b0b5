### Sync service keeps the local DuckDB mirror and the spreadsheet in step.
import logging

import config
from db import SHEET_TABLES, get_db, log_error
from repositories.base_repository import clear_change, get_row, pending_changes, replace_rows
from services.sheets_client import SheetsClient, SheetsError


def sheets_configured():
    return bool(config.SHEETS_ID and config.SHEETS_ACCESS_TOKEN)


def push_pending(client, conn=None):
    """
    Send queued local writes to the spreadsheet, oldest first.

    Inserts and updates send the row as it is now, so a row deleted
    locally before it was pushed is skipped. Each change leaves the queue
    once the sheet accepted it; a failing request raises SheetsError and
    keeps the rest queued. Returns the number of changes handled.
    """
    own_conn = False
    if conn is None:
        conn = get_db()
        own_conn = True

    handled = 0
    try:
        for change in pending_changes(conn):
            table, row_id, action = change["table_name"], change["row_id"], change["action"]

            if action == "delete":
                if not client.delete_row(table, row_id):
                    logging.warning(f"Row {row_id} was already gone from sheet {table}")
            else:
                row = get_row(conn, table, row_id)
                if row is not None and action == "insert":
                    client.append_row(table, row)
                elif row is not None and not client.update_row(table, row_id, row):
                    logging.warning(f"Row {row_id} no longer exists in sheet {table}; update dropped")

            clear_change(conn, change["seq"])
            handled += 1
    finally:
        if own_conn:
            conn.close()

    if handled:
        logging.info(f"Pushed {handled} local changes to the spreadsheet")
    return handled


def push_local_changes():
    """
    Push queued writes right away when a spreadsheet is configured.

    A failed push is logged and the changes stay queued for the next sync.
    """
    if not sheets_configured():
        return 0
    try:
        return push_pending(SheetsClient.from_config())
    except SheetsError as e:
        log_error(f"Local changes kept for the next sync: {e}")
        return 0


def sync_from_sheets(client, conn=None):
    """
    Push queued local writes, then replace each mirrored table with the
    current contents of its tab.

    If the push fails nothing is read and the local copy is untouched.
    All tabs are read before anything is written, and the writes run in a
    single transaction, so a failing tab leaves the local copy untouched.
    Returns ``{table: row_count}``.
    """
    own_conn = False
    if conn is None:
        conn = get_db()
        own_conn = True

    try:
        push_pending(client, conn)
        snapshot = {table: client.read_sheet(table) for table in SHEET_TABLES}

        conn.execute("BEGIN TRANSACTION")
        try:
            for table, rows in snapshot.items():
                replace_rows(conn, table, rows)
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise
    finally:
        if own_conn:
            conn.close()

    counts = {table: len(rows) for table, rows in snapshot.items()}
    logging.info(f"Synced spreadsheet tabs: {counts}")
    return counts
