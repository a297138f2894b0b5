from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from models.finance import (
    Bill,
    BillKind,
    Category,
    Goal,
    GoalTransaction,
    GoalTransactionKind,
    Transaction,
    TransactionKind,
)
from models.projection_dto import CategoryTotal, DashboardStats, GoalProgress, MonthlyTotals
from utils.dates import month_key, month_label

FALLBACK_CATEGORY_COLOR = "#6b7280"


def _paid_bill_flows(bills: Optional[Iterable[Bill]]):
    """Paid bills as ``(date, kind, amount, category)`` on their payment date."""
    for bill in bills or ():
        if not bill.paid or bill.paid_date is None:
            continue
        kind = TransactionKind.INCOME if bill.kind == BillKind.RECEIVABLE else TransactionKind.EXPENSE
        yield bill.paid_date, kind, bill.amount, bill.category


def dashboard_stats(transactions: Iterable[Transaction], reference_date: Optional[date] = None) -> DashboardStats:
    """All-time and current-month income/expense totals."""
    today = reference_date or date.today()
    current = month_key(today)

    total_income = total_expense = Decimal("0")
    month_income = month_expense = Decimal("0")
    for tx in transactions:
        in_month = month_key(tx.date) == current
        if tx.kind == TransactionKind.INCOME:
            total_income += tx.amount
            if in_month:
                month_income += tx.amount
        else:
            total_expense += tx.amount
            if in_month:
                month_expense += tx.amount

    return DashboardStats(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        month_income=month_income,
        month_expense=month_expense,
        month_balance=month_income - month_expense,
    )


def monthly_totals(transactions: Iterable[Transaction], bills: Optional[Iterable[Bill]] = None) -> List[MonthlyTotals]:
    """Income and expense per month that has activity, sorted by month."""
    flows = [(tx.date, tx.kind, tx.amount) for tx in transactions]
    flows.extend((d, kind, amount) for d, kind, amount, _ in _paid_bill_flows(bills))

    months = {}
    for d, kind, amount in flows:
        key = month_key(d)
        totals = months.setdefault(key, [Decimal("0"), Decimal("0")])
        if kind == TransactionKind.INCOME:
            totals[0] += amount
        else:
            totals[1] += amount

    return [
        MonthlyTotals(month_key=key, label=month_label(key), income=income, expense=expense)
        for key, (income, expense) in sorted(months.items())
    ]


def category_totals(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    bills: Optional[Iterable[Bill]] = None,
) -> List[CategoryTotal]:
    """Expense totals per category, largest first."""
    colors = {c.name: c.color for c in categories}

    amounts = {}
    for tx in transactions:
        if tx.kind == TransactionKind.EXPENSE:
            amounts[tx.category] = amounts.get(tx.category, Decimal("0")) + tx.amount
    for _, kind, amount, category in _paid_bill_flows(bills):
        if kind == TransactionKind.EXPENSE:
            amounts[category] = amounts.get(category, Decimal("0")) + amount

    result = [
        CategoryTotal(category=name, amount=amount, color=colors.get(name) or FALLBACK_CATEGORY_COLOR)
        for name, amount in amounts.items()
    ]
    return sorted(result, key=lambda c: c.amount, reverse=True)


def goal_current_amount(goal_id: str, goal_transactions: Iterable[GoalTransaction]) -> Decimal:
    # withdrawals can't take a goal below zero
    total = Decimal("0")
    for gt in goal_transactions:
        if gt.goal_id != goal_id:
            continue
        if gt.kind == GoalTransactionKind.DEPOSIT:
            total += gt.amount
        else:
            total -= gt.amount
    return max(Decimal("0"), total)


def goal_progress(goals: Iterable[Goal], goal_transactions: Iterable[GoalTransaction]) -> List[GoalProgress]:
    goal_transactions = list(goal_transactions)
    progress = []
    for goal in goals:
        current = goal_current_amount(goal.id, goal_transactions)
        percent = float(current / goal.target * 100) if goal.target > 0 else 0.0
        progress.append(GoalProgress(
            goal_id=goal.id,
            name=goal.name,
            target=goal.target,
            current=current,
            percent=min(percent, 100.0),
            completed=percent >= 100,
        ))
    return progress
