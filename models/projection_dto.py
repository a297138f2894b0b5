from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List

from models.finance import TransactionKind

ZERO = Decimal("0")


@dataclass(frozen=True)
class ForecastOccurrence:
    """One future instance of a recurring transaction. Never persisted."""
    id: str
    source_definition_id: str
    date: date
    kind: TransactionKind
    description: str
    amount: Decimal
    category: str
    payment_method: str = ""
    note: str = ""


@dataclass
class MonthlyBalanceBucket:
    month_key: str  # YYYY-MM
    label: str  # display only, e.g. "mar/24"
    incoming: Decimal = ZERO
    outgoing: Decimal = ZERO
    invested_direct: Decimal = ZERO
    invested_via_goals: Decimal = ZERO
    running_balance: Decimal = ZERO
    projected_receivable: Decimal = ZERO
    projected_payable: Decimal = ZERO

    @property
    def net_monthly(self) -> Decimal:
        return self.incoming - self.outgoing


@dataclass
class ForecastMonth:
    month_key: str
    label: str
    occurrences: List[ForecastOccurrence] = field(default_factory=list)
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO


@dataclass
class DashboardStats:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    month_income: Decimal
    month_expense: Decimal
    month_balance: Decimal


@dataclass
class MonthlyTotals:
    month_key: str
    label: str
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass
class CategoryTotal:
    category: str
    amount: Decimal
    color: str


@dataclass
class GoalProgress:
    goal_id: str
    name: str
    target: Decimal
    current: Decimal
    percent: float
    completed: bool
