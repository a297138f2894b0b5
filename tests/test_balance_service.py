from datetime import date
from decimal import Decimal

import pytest

from factories import make_bill, make_goal_movement, make_occurrence, make_transaction
from models.finance import BillKind, GoalTransactionKind, TransactionKind
from models.projection_dto import MonthlyBalanceBucket
from services.balance_service import (
    BalanceInvariantError,
    _check_buckets,
    aggregate_balance,
    opening_balance,
)

TODAY = date(2024, 6, 15)


def by_key(buckets):
    return {b.month_key: b for b in buckets}


@pytest.mark.parametrize("year", [2023, 2024, 2030])
def test_always_twelve_months_in_order(year):
    buckets = aggregate_balance(year, [], [], reference_date=TODAY)

    assert [b.month_key for b in buckets] == [f"{year}-{m:02d}" for m in range(1, 13)]
    assert all(b.running_balance == 0 for b in buckets)


def test_previous_year_net_is_carried_forward():
    transactions = [
        make_transaction(date(2023, 2, 1), "3000", kind=TransactionKind.INCOME),
        make_transaction(date(2023, 9, 1), "2000"),
    ]

    buckets = aggregate_balance(2024, transactions, [], reference_date=TODAY)

    assert all(b.running_balance == Decimal("1000") for b in buckets)


def test_only_the_previous_year_is_carried():
    transactions = [
        make_transaction(date(2022, 5, 1), "500", kind=TransactionKind.INCOME),
        make_transaction(date(2023, 5, 1), "100", kind=TransactionKind.INCOME),
    ]

    assert opening_balance(2024, transactions) == Decimal("100")
    assert opening_balance(1, transactions) == Decimal("0")


def test_investment_expense_scenario():
    transactions = [make_transaction(date(2024, 3, 8), "1500", category="Investimentos")]

    buckets = by_key(aggregate_balance(2024, transactions, [], reference_date=TODAY))

    march = buckets["2024-03"]
    assert march.outgoing == Decimal("1500")
    assert march.invested_direct == Decimal("1500")
    assert march.incoming == 0
    assert march.net_monthly == Decimal("-1500")
    assert march.label == "mar/24"

    for key, bucket in buckets.items():
        if key != "2024-03":
            assert bucket.incoming == bucket.outgoing == bucket.invested_direct == 0
        expected = Decimal("0") if key < "2024-03" else Decimal("-1500")
        assert bucket.running_balance == expected


def test_running_balance_accumulates_month_by_month():
    transactions = [
        make_transaction(date(2024, 1, 5), "8500", kind=TransactionKind.INCOME),
        make_transaction(date(2024, 1, 10), "2000"),
        make_transaction(date(2024, 2, 10), "2500"),
    ]

    buckets = aggregate_balance(2024, transactions, [], reference_date=TODAY)

    assert buckets[0].running_balance == Decimal("6500")
    assert buckets[1].running_balance == Decimal("4000")
    assert buckets[11].running_balance == Decimal("4000")


def test_goal_deposits_count_as_invested_but_not_withdrawals():
    movements = [
        make_goal_movement(date(2024, 3, 1), "200"),
        make_goal_movement(date(2024, 3, 20), "50", kind=GoalTransactionKind.WITHDRAWAL),
        make_goal_movement(date(2023, 3, 1), "999"),
    ]

    buckets = by_key(aggregate_balance(2024, [], movements, reference_date=TODAY))

    assert buckets["2024-03"].invested_via_goals == Decimal("200")
    assert buckets["2024-03"].net_monthly == 0
    assert sum(b.invested_via_goals for b in buckets.values()) == Decimal("200")


def test_current_year_forecasts_only_from_today():
    forecasts = [
        make_occurrence(date(2024, 6, 10), "100"),
        make_occurrence(date(2024, 6, 15), "200"),
        make_occurrence(date(2024, 8, 1), "300", kind=TransactionKind.INCOME),
        make_occurrence(date(2025, 1, 1), "400"),
    ]

    buckets = by_key(aggregate_balance(2024, [], [], forecasts=forecasts, reference_date=TODAY))

    assert buckets["2024-06"].outgoing == Decimal("200")
    assert buckets["2024-08"].incoming == Decimal("300")
    assert buckets["2024-12"].running_balance == Decimal("100")


def test_past_year_ignores_forecasts():
    forecasts = [make_occurrence(date(2023, 9, 1), "100")]

    buckets = aggregate_balance(2023, [], [], forecasts=forecasts, reference_date=TODAY)

    assert all(b.outgoing == 0 for b in buckets)


def test_future_year_uses_all_its_forecasts():
    forecasts = [
        make_occurrence(date(2025, 1, 1), "400", category="Investimentos"),
        make_occurrence(date(2025, 2, 1), "400"),
    ]

    buckets = by_key(aggregate_balance(2025, [], [], forecasts=forecasts, reference_date=TODAY))

    assert buckets["2025-01"].outgoing == Decimal("400")
    assert buckets["2025-01"].invested_direct == Decimal("400")
    assert buckets["2025-02"].outgoing == Decimal("400")


def test_forecasts_do_not_feed_the_opening_balance():
    forecasts = [make_occurrence(date(2024, 9, 1), "100")]

    buckets = aggregate_balance(2025, [], [], forecasts=forecasts, reference_date=TODAY)

    assert buckets[0].running_balance == 0


def test_paid_bills_count_on_payment_date():
    bills = [
        make_bill("500", kind=BillKind.RECEIVABLE, due=date(2024, 1, 31), paid_on=date(2024, 2, 10), paid=True),
        make_bill("80", due=date(2024, 1, 5), paid_on=date(2023, 12, 30), paid=True),
        make_bill("60", paid=True),
    ]

    buckets = by_key(aggregate_balance(2024, [], [], bills=bills, reference_date=TODAY))

    assert buckets["2024-01"].incoming == 0
    assert buckets["2024-02"].incoming == Decimal("500")
    assert sum(b.outgoing for b in buckets.values()) == 0


def test_unpaid_bills_only_feed_projections():
    bills = [
        make_bill("300", kind=BillKind.RECEIVABLE, due=date(2024, 4, 1)),
        make_bill("120", due=date(2024, 5, 20)),
        make_bill("70"),
    ]

    buckets = by_key(aggregate_balance(2024, [], [], bills=bills, reference_date=TODAY))

    assert buckets["2024-04"].projected_receivable == Decimal("300")
    assert buckets["2024-05"].projected_payable == Decimal("120")
    assert all(b.incoming == b.outgoing == 0 for b in buckets.values())
    assert buckets["2024-12"].running_balance == 0


def test_same_inputs_same_output():
    transactions = [make_transaction(date(2024, 2, 1), "10")]
    forecasts = [make_occurrence(date(2024, 9, 1), "100")]

    first = aggregate_balance(2024, transactions, [], forecasts=forecasts, reference_date=TODAY)
    second = aggregate_balance(2024, transactions, [], forecasts=forecasts, reference_date=TODAY)

    assert first == second


def test_malformed_series_raises():
    buckets = [MonthlyBalanceBucket(month_key=f"2024-{m:02d}", label="") for m in range(1, 12)]

    with pytest.raises(BalanceInvariantError):
        _check_buckets(2024, buckets)

    buckets.append(MonthlyBalanceBucket(month_key="2025-01", label=""))
    with pytest.raises(BalanceInvariantError):
        _check_buckets(2024, buckets)
