from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List

from models.finance import end_policy_to_row
from services.forecast_service import forecast_totals


def _jsonable(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


def to_dict(obj):
    """Convert a result dataclass into JSON-friendly primitives."""
    return _jsonable(asdict(obj))


def recurring_to_dict(definition):
    # end policy goes out as the sheet stores it, not as a nested object
    data = to_dict(definition)
    data.pop("end_policy")
    data["end_type"], data["duration_months"] = end_policy_to_row(definition.end_policy)
    return data


@dataclass
class ForecastMonthDTO:
    month_key: str
    label: str
    total_income: float
    total_expense: float
    occurrences: List[dict]


@dataclass
class ForecastResponseDTO:
    """Forecast window with its occurrences grouped by month."""
    reference_date: str  # ISO format
    months_ahead: int
    total_income: float
    total_expense: float
    months: List[ForecastMonthDTO]

    @classmethod
    def from_forecast(cls, reference_date, months_ahead, months):
        totals = forecast_totals(months)
        return cls(
            reference_date=reference_date.isoformat(),
            months_ahead=months_ahead,
            total_income=float(totals["income"]),
            total_expense=float(totals["expense"]),
            months=[
                ForecastMonthDTO(
                    month_key=m.month_key,
                    label=m.label,
                    total_income=float(m.total_income),
                    total_expense=float(m.total_expense),
                    occurrences=[to_dict(o) for o in m.occurrences],
                )
                for m in months
            ]
        )


@dataclass
class BalanceMonthDTO:
    month_key: str
    label: str
    incoming: float
    outgoing: float
    net_monthly: float
    invested_direct: float
    invested_via_goals: float
    running_balance: float
    projected_receivable: float
    projected_payable: float

    @classmethod
    def from_bucket(cls, bucket):
        return cls(
            month_key=bucket.month_key,
            label=bucket.label,
            incoming=float(bucket.incoming),
            outgoing=float(bucket.outgoing),
            net_monthly=float(bucket.net_monthly),
            invested_direct=float(bucket.invested_direct),
            invested_via_goals=float(bucket.invested_via_goals),
            running_balance=float(bucket.running_balance),
            projected_receivable=float(bucket.projected_receivable),
            projected_payable=float(bucket.projected_payable),
        )
