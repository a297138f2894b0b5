import os
from datetime import date

import pytest

os.environ.setdefault("BUDGET_LOG_FILE", os.devnull)

import config
from db import get_db, init_db


@pytest.fixture()
def reference_date():
    return date(2024, 6, 15)


@pytest.fixture()
def db_file(tmp_path, monkeypatch):
    """Point the app at a fresh DuckDB file with the schema in place."""
    path = str(tmp_path / "budget.duckdb")
    monkeypatch.setattr(config, "DB_FILE", path)
    init_db()
    return path


@pytest.fixture()
def conn(db_file):
    connection = get_db()
    yield connection
    connection.close()


@pytest.fixture(autouse=True)
def no_spreadsheet(monkeypatch):
    """Writes stay local unless a test configures a spreadsheet."""
    monkeypatch.setattr(config, "SHEETS_ID", None)
    monkeypatch.setattr(config, "SHEETS_ACCESS_TOKEN", None)
