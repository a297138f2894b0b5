from datetime import date
from decimal import Decimal

import pytest

from factories import make_recurring
from models.finance import AfterMonths, RecurrencePeriod, TransactionKind
from services.forecast_service import (
    MAX_OCCURRENCES,
    expand_recurring,
    forecast_totals,
    group_forecast_by_month,
)
from utils.dates import add_months


def dates_of(occurrences):
    return [o.date for o in occurrences]


def test_occurrences_stay_inside_window():
    today = date(2024, 5, 15)
    definitions = [
        make_recurring("a", start=date(2023, 1, 10)),
        make_recurring("b", start=date(2024, 7, 31), period=RecurrencePeriod.BIMONTHLY),
        make_recurring("c", start=date(2022, 6, 15), period=RecurrencePeriod.ANNUAL),
        make_recurring("d", start=date(2024, 5, 1), active=False),
    ]

    result = expand_recurring(definitions, 6, reference_date=today)

    horizon = add_months(today, 6)
    assert result
    assert all(today <= o.date <= horizon for o in result)
    assert "d" not in {o.source_definition_id for o in result}


def test_month_end_is_clamped_not_rolled_over():
    rt = make_recurring(start=date(2024, 1, 31))

    result = expand_recurring([rt], 3, reference_date=date(2024, 1, 1))

    assert dates_of(result) == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]


def test_after_months_cutoff():
    rt = make_recurring(start=date(2024, 1, 1), end_policy=AfterMonths(3))

    result = expand_recurring([rt], 24, reference_date=date(2023, 12, 15))

    assert dates_of(result) == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]


def test_after_months_cutoff_counts_from_start_not_today():
    rt = make_recurring(start=date(2024, 1, 1), end_policy=AfterMonths(3))

    result = expand_recurring([rt], 24, reference_date=date(2024, 2, 15))

    assert dates_of(result) == [date(2024, 3, 1)]


def test_past_occurrences_are_not_generated():
    rt = make_recurring(id="rt", start=date(2020, 1, 31))

    result = expand_recurring([rt], 2, reference_date=date(2024, 2, 10))

    assert dates_of(result) == [date(2024, 2, 29), date(2024, 3, 31)]
    # ids count occurrences from the start date
    assert [o.id for o in result] == ["rt-49", "rt-50"]


def test_today_is_included_with_zero_months():
    rt = make_recurring(start=date(2024, 3, 10))

    result = expand_recurring([rt], 0, reference_date=date(2024, 3, 10))

    assert dates_of(result) == [date(2024, 3, 10)]


def test_quarterly_step():
    rt = make_recurring(start=date(2024, 1, 15), period=RecurrencePeriod.QUARTERLY)

    result = expand_recurring([rt], 12, reference_date=date(2024, 1, 1))

    assert dates_of(result) == [date(2024, 1, 15), date(2024, 4, 15), date(2024, 7, 15), date(2024, 10, 15)]


def test_start_after_horizon_yields_nothing():
    rt = make_recurring(start=date(2026, 1, 1))

    assert expand_recurring([rt], 12, reference_date=date(2024, 1, 1)) == []


def test_sorted_by_date_with_stable_ties():
    first = make_recurring("first", start=date(2024, 1, 20))
    second = make_recurring("second", start=date(2024, 1, 5))
    third = make_recurring("third", start=date(2024, 1, 20))

    result = expand_recurring([first, second, third], 1, reference_date=date(2024, 1, 1))

    assert [(o.date, o.source_definition_id) for o in result] == [
        (date(2024, 1, 5), "second"),
        (date(2024, 1, 20), "first"),
        (date(2024, 1, 20), "third"),
    ]


def test_fields_copied_from_definition():
    rt = make_recurring("salary", start=date(2024, 1, 5), amount="8500",
                        kind=TransactionKind.INCOME, category="Outros")

    occ = expand_recurring([rt], 1, reference_date=date(2024, 1, 1))[0]

    assert occ.source_definition_id == "salary"
    assert occ.kind == TransactionKind.INCOME
    assert occ.amount == Decimal("8500")
    assert occ.category == "Outros"
    assert occ.description == "recurring salary"


def test_occurrence_cap():
    rt = make_recurring(start=date(2024, 1, 1))

    result = expand_recurring([rt], 1200, reference_date=date(2024, 1, 1))

    assert len(result) == MAX_OCCURRENCES


def test_cap_warning_only_when_occurrences_are_dropped(caplog):
    rt = make_recurring(start=date(2024, 1, 1))

    exact = expand_recurring([rt], MAX_OCCURRENCES - 1, reference_date=date(2024, 1, 1))
    assert len(exact) == MAX_OCCURRENCES
    assert "occurrence cap" not in caplog.text

    expand_recurring([rt], MAX_OCCURRENCES, reference_date=date(2024, 1, 1))
    assert "occurrence cap" in caplog.text


def test_negative_horizon_is_rejected():
    with pytest.raises(ValueError):
        expand_recurring([], -1, reference_date=date(2024, 1, 1))


def test_horizon_past_year_9999_is_rejected():
    with pytest.raises(ValueError, match="months_ahead"):
        expand_recurring([], 12 * 8000, reference_date=date(2024, 1, 1))


def test_same_inputs_same_output():
    definitions = [
        make_recurring("a", start=date(2023, 11, 30)),
        make_recurring("b", start=date(2024, 2, 29), period=RecurrencePeriod.ANNUAL),
    ]
    today = date(2024, 2, 1)

    assert expand_recurring(definitions, 24, reference_date=today) == expand_recurring(definitions, 24, reference_date=today)


def test_group_forecast_by_month():
    definitions = [
        make_recurring("rent", start=date(2024, 1, 10), amount="2000"),
        make_recurring("salary", start=date(2024, 1, 5), amount="8500", kind=TransactionKind.INCOME),
    ]
    today = date(2024, 1, 1)
    occurrences = expand_recurring(definitions, 24, reference_date=today)

    months = group_forecast_by_month(occurrences, 2, reference_date=today)

    assert [m.month_key for m in months] == ["2024-01", "2024-02"]
    january = months[0]
    assert january.label == "jan/24"
    assert [o.source_definition_id for o in january.occurrences] == ["salary", "rent"]
    assert january.total_income == Decimal("8500")
    assert january.total_expense == Decimal("2000")

    totals = forecast_totals(months)
    assert totals == {"income": Decimal("17000"), "expense": Decimal("4000"), "net": Decimal("13000")}
