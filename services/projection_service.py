from datetime import date
from typing import Optional

import config
from services.balance_service import aggregate_balance
from services.forecast_service import expand_recurring, group_forecast_by_month
from services.transaction_service import load_snapshot
from services.summary_service import category_totals, dashboard_stats, goal_progress, monthly_totals


def build_forecast(months_ahead: Optional[int] = None, reference_date: Optional[date] = None):
    """Forecast occurrences and their monthly grouping for the stored recurring transactions.

    Read-only; ``reference_date`` defaults to ``date.today()``.
    """
    today = reference_date or date.today()
    if months_ahead is None:
        months_ahead = config.FORECAST_MONTHS_AHEAD

    snapshot = load_snapshot()
    occurrences = expand_recurring(snapshot.recurring, months_ahead, reference_date=today)
    months = group_forecast_by_month(occurrences, months_ahead, reference_date=today)
    return occurrences, months


def build_balance(year: int, include_forecast: bool = True, reference_date: Optional[date] = None):
    """Twelve-month balance series for ``year`` from the stored data."""
    today = reference_date or date.today()
    snapshot = load_snapshot()

    forecasts = None
    if include_forecast:
        forecasts = expand_recurring(snapshot.recurring, config.FORECAST_MONTHS_AHEAD, reference_date=today)

    return aggregate_balance(
        year,
        snapshot.transactions,
        snapshot.goal_transactions,
        forecasts=forecasts,
        bills=snapshot.bills,
        reference_date=today,
    )


def build_dashboard(reference_date: Optional[date] = None):
    today = reference_date or date.today()
    snapshot = load_snapshot()
    return {
        "stats": dashboard_stats(snapshot.transactions, reference_date=today),
        "monthly": monthly_totals(snapshot.transactions, snapshot.bills),
        "categories": category_totals(snapshot.transactions, snapshot.categories, snapshot.bills),
        "goals": goal_progress(snapshot.goals, snapshot.goal_transactions),
    }
