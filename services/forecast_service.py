### Forecast service expands recurring transactions into dated occurrences over a future window.
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from models.finance import AfterMonths, RecurringTransaction, TransactionKind
from models.projection_dto import ForecastMonth, ForecastOccurrence
from utils.dates import add_months, month_key, month_label, months_between

MAX_OCCURRENCES = 1000


def _first_index_on_or_after(start: date, step: int, today: date) -> int:
    """Smallest occurrence index whose date is not before ``today``."""
    if start >= today:
        return 0
    k = months_between(start, today) // step
    # clamping can land the candidate a few days before today
    while add_months(start, k * step) < today:
        k += 1
    return k


def get_occurrences_in_window(definition: RecurringTransaction, today: date, horizon_end: date):
    """Yield ``(index, date)`` for every occurrence in ``[today, horizon_end]``.

    Occurrence ``k`` is always computed from the start date, so the original
    day of month survives short months (Jan 31 -> Feb 29 -> Mar 31).
    """
    start = definition.start_date
    if start > horizon_end:
        return

    step = definition.period.months
    if step <= 0:
        return

    cutoff = None
    if isinstance(definition.end_policy, AfterMonths):
        cutoff = definition.end_policy.months

    k = _first_index_on_or_after(start, step, today)
    emitted = 0
    while True:
        try:
            occ_date = add_months(start, k * step)
        except ValueError:
            # past year 9999, so past any horizon
            break
        if occ_date > horizon_end:
            break
        if cutoff is not None and months_between(start, occ_date) >= cutoff:
            break
        if emitted == MAX_OCCURRENCES:
            logging.warning(f"Recurring transaction {definition.id} hit the {MAX_OCCURRENCES} occurrence cap")
            break
        yield k, occ_date
        emitted += 1
        k += 1


def expand_recurring(
    definitions: Iterable[RecurringTransaction],
    months_ahead: int,
    reference_date: Optional[date] = None,
) -> List[ForecastOccurrence]:
    """Materialize active recurring transactions between today and today + ``months_ahead``.

    Pure function of its arguments: ``reference_date`` stands in for today
    and defaults to ``date.today()``. Occurrence ids are
    ``"<definition id>-<k>"`` where ``k`` counts occurrences from the start
    date. Output is sorted by date; ties keep definition order.
    """
    if months_ahead < 0:
        raise ValueError("months_ahead must be >= 0")

    today = reference_date or date.today()
    try:
        horizon_end = add_months(today, months_ahead)
    except ValueError as exc:
        raise ValueError(f"months_ahead={months_ahead} reaches past the last supported date") from exc

    forecasts = []
    for definition in definitions:
        if not definition.active:
            continue
        for k, occ_date in get_occurrences_in_window(definition, today, horizon_end):
            forecasts.append(ForecastOccurrence(
                id=f"{definition.id}-{k}",
                source_definition_id=definition.id,
                date=occ_date,
                kind=definition.kind,
                description=definition.description,
                amount=definition.amount,
                category=definition.category,
                payment_method=definition.payment_method,
                note=definition.note,
            ))

    return sorted(forecasts, key=lambda f: f.date)


def group_forecast_by_month(
    occurrences: Iterable[ForecastOccurrence],
    months_ahead: int,
    reference_date: Optional[date] = None,
) -> List[ForecastMonth]:
    """Group occurrences up to ``months_ahead`` into per-month totals, oldest month first."""
    today = reference_date or date.today()
    window_end = add_months(today, months_ahead)

    groups = {}
    for occ in occurrences:
        if occ.date > window_end:
            continue
        key = month_key(occ.date)
        month = groups.get(key)
        if month is None:
            month = groups[key] = ForecastMonth(month_key=key, label=month_label(key))
        month.occurrences.append(occ)
        if occ.kind == TransactionKind.INCOME:
            month.total_income += occ.amount
        else:
            month.total_expense += occ.amount

    for month in groups.values():
        month.occurrences.sort(key=lambda o: o.date)

    return [groups[key] for key in sorted(groups)]


def forecast_totals(months: Iterable[ForecastMonth]) -> dict:
    income = Decimal("0")
    expense = Decimal("0")
    for month in months:
        income += month.total_income
        expense += month.total_expense
    return {"income": income, "expense": expense, "net": income - expense}
