import os

# -----------------------------
# Storage / logging
# -----------------------------
DB_FILE = os.getenv("BUDGET_DB_FILE", "budget.duckdb")
LOG_FILE = os.getenv("BUDGET_LOG_FILE", "budget.log")

# -----------------------------
# Google Sheets
# -----------------------------
# The access token is obtained outside this service (service account or
# OAuth consent) and handed in through the environment.
SHEETS_ID = os.getenv("SHEETS_ID")
SHEETS_ACCESS_TOKEN = os.getenv("SHEETS_ACCESS_TOKEN")
SHEETS_API_BASE = os.getenv("SHEETS_API_BASE", "https://sheets.googleapis.com/v4/spreadsheets")
SHEETS_TIMEOUT = int(os.getenv("SHEETS_TIMEOUT", "30"))

# -----------------------------
# Forecast
# -----------------------------
FORECAST_MONTHS_AHEAD = int(os.getenv("FORECAST_MONTHS_AHEAD", "24"))
