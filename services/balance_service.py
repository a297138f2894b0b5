"""
Balance Aggregator — Year-Scoped Monthly Balance Series

Pure functions that bucket realized transactions, goal deposits, forecast
occurrences and bills into the twelve months of a calendar year, carrying
the previous year's net result into the running balance.
No database access; no side effects.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from models.finance import (
    INVESTMENT_CATEGORY,
    Bill,
    BillKind,
    GoalTransaction,
    GoalTransactionKind,
    Transaction,
    TransactionKind,
)
from models.projection_dto import ForecastOccurrence, MonthlyBalanceBucket
from utils.dates import month_key, month_label, year_month_keys


class BalanceInvariantError(RuntimeError):
    """The aggregator produced something other than twelve in-year months."""


def opening_balance(year: int, transactions: Iterable[Transaction]) -> Decimal:
    """Net result (income minus expense) of realized transactions in ``year - 1``.

    Forecasts, goal movements and bills are not part of the carry-forward.
    """
    total = Decimal("0")
    if year <= 1:
        return total

    previous = year - 1
    for tx in transactions:
        if tx.date.year != previous:
            continue
        if tx.kind == TransactionKind.INCOME:
            total += tx.amount
        else:
            total -= tx.amount
    return total


def _add_flow(bucket: MonthlyBalanceBucket, kind: TransactionKind, amount: Decimal, category: str):
    if kind == TransactionKind.INCOME:
        bucket.incoming += amount
    else:
        bucket.outgoing += amount
        if category == INVESTMENT_CATEGORY:
            bucket.invested_direct += amount


def _check_buckets(year: int, buckets: List[MonthlyBalanceBucket]):
    expected = year_month_keys(year)
    keys = [b.month_key for b in buckets]
    if keys != expected:
        logging.error(f"Balance series for {year} is malformed: {keys}")
        raise BalanceInvariantError(
            f"expected 12 months {expected[0]}..{expected[-1]}, got {keys}"
        )


def aggregate_balance(
    year: int,
    transactions: Iterable[Transaction],
    goal_transactions: Iterable[GoalTransaction],
    forecasts: Optional[Iterable[ForecastOccurrence]] = None,
    bills: Optional[Iterable[Bill]] = None,
    reference_date: Optional[date] = None,
) -> List[MonthlyBalanceBucket]:
    """
    Build the January..December balance series for ``year``.

    Args:
        year: Calendar year to aggregate.
        transactions: Realized transactions (any year; filtered here).
        goal_transactions: Goal movements; only deposits count as invested.
        forecasts: Optional forecast occurrences. Used only when ``year`` is
                   the current or a future year; in the current year only
                   occurrences dated today or later are counted.
        bills: Optional bills. Paid bills count on their payment date;
               unpaid bills only feed the projected receivable/payable.
        reference_date: Stands in for today. Defaults to ``date.today()``.

    Returns:
        Exactly twelve ``MonthlyBalanceBucket`` objects in calendar order.

    Raises:
        BalanceInvariantError: if the series is not twelve months of ``year``.
    """
    today = reference_date or date.today()
    transactions = list(transactions)
    prefix = f"{year:04d}-"

    buckets = [MonthlyBalanceBucket(month_key=key, label=month_label(key)) for key in year_month_keys(year)]
    by_key = {b.month_key: b for b in buckets}

    def bucket_for(d: date):
        key = month_key(d)
        if not key.startswith(prefix):
            return None
        return by_key.get(key)

    for tx in transactions:
        if tx.date.year != year:
            continue
        bucket = bucket_for(tx.date)
        if bucket is not None:
            _add_flow(bucket, tx.kind, tx.amount, tx.category)

    for gt in goal_transactions:
        if gt.date.year != year or gt.kind != GoalTransactionKind.DEPOSIT:
            continue
        bucket = bucket_for(gt.date)
        if bucket is not None:
            bucket.invested_via_goals += gt.amount

    if forecasts is not None and year >= today.year:
        for occ in forecasts:
            if occ.date.year != year:
                continue
            if year == today.year and occ.date < today:
                continue
            bucket = bucket_for(occ.date)
            if bucket is not None:
                _add_flow(bucket, occ.kind, occ.amount, occ.category)

    for bill in bills or ():
        kind = TransactionKind.INCOME if bill.kind == BillKind.RECEIVABLE else TransactionKind.EXPENSE
        if bill.paid:
            if bill.paid_date is None or bill.paid_date.year != year:
                continue
            bucket = bucket_for(bill.paid_date)
            if bucket is not None:
                _add_flow(bucket, kind, bill.amount, bill.category)
        else:
            if bill.due_date is None or bill.due_date.year != year:
                continue
            bucket = bucket_for(bill.due_date)
            if bucket is None:
                continue
            if kind == TransactionKind.INCOME:
                bucket.projected_receivable += bill.amount
            else:
                bucket.projected_payable += bill.amount

    running = opening_balance(year, transactions)
    for bucket in buckets:
        running += bucket.net_monthly
        bucket.running_balance = running

    _check_buckets(year, buckets)
    return buckets
