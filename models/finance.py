from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

INVESTMENT_CATEGORY = "Investimentos"


class TransactionKind(str, Enum):
    INCOME = "Receita"
    EXPENSE = "Despesa"


class RecurrencePeriod(str, Enum):
    MONTHLY = "mensal"
    BIMONTHLY = "bimestral"
    QUARTERLY = "trimestral"
    SEMIANNUAL = "semestral"
    ANNUAL = "anual"

    @property
    def months(self) -> int:
        return _PERIOD_MONTHS[self]

    @classmethod
    def parse(cls, raw: str) -> "RecurrencePeriod":
        """Accept the sheet value (``mensal``) or the English name (``monthly``)."""
        value = (raw or "").strip().lower()
        for period in cls:
            if value in (period.value, period.name.lower()):
                return period
        raise ValueError(f"unknown recurrence period: {raw!r}")


_PERIOD_MONTHS = {
    RecurrencePeriod.MONTHLY: 1,
    RecurrencePeriod.BIMONTHLY: 2,
    RecurrencePeriod.QUARTERLY: 3,
    RecurrencePeriod.SEMIANNUAL: 6,
    RecurrencePeriod.ANNUAL: 12,
}


@dataclass(frozen=True)
class UntilCancelled:
    pass


@dataclass(frozen=True)
class AfterMonths:
    months: int


EndPolicy = Union[UntilCancelled, AfterMonths]


def end_policy_from_row(end_type: str, duration_months: Optional[int]) -> EndPolicy:
    """Map the sheet's ``fim_tipo``/``meses_duracao`` pair to an end policy.

    ``after_months`` without a usable duration behaves like ``until_cancelled``.
    """
    if (end_type or "").strip() == "after_months" and duration_months:
        return AfterMonths(duration_months)
    return UntilCancelled()


def end_policy_to_row(policy: EndPolicy):
    """Inverse of ``end_policy_from_row``: ``(fim_tipo, meses_duracao)``."""
    if isinstance(policy, AfterMonths):
        return "after_months", policy.months
    return "until_cancelled", None


@dataclass(frozen=True)
class RecurringTransaction:
    id: str
    kind: TransactionKind
    description: str
    amount: Decimal
    category: str
    start_date: date
    period: RecurrencePeriod
    end_policy: EndPolicy = UntilCancelled()
    active: bool = True
    payment_method: str = ""
    note: str = ""


@dataclass(frozen=True)
class Transaction:
    id: str
    date: date
    kind: TransactionKind
    description: str
    amount: Decimal
    category: str
    payment_method: str = ""
    note: str = ""


class GoalTransactionKind(str, Enum):
    DEPOSIT = "deposito"
    WITHDRAWAL = "retirada"


@dataclass(frozen=True)
class GoalTransaction:
    id: str
    goal_id: str
    kind: GoalTransactionKind
    amount: Decimal
    date: date
    note: str = ""


@dataclass(frozen=True)
class Goal:
    id: str
    name: str
    target: Decimal
    deadline: Optional[date] = None
    color: str = ""


class BillKind(str, Enum):
    PAYABLE = "pagar"
    RECEIVABLE = "receber"


@dataclass(frozen=True)
class Bill:
    id: str
    kind: BillKind
    description: str
    amount: Decimal
    category: str
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    paid: bool = False
    note: str = ""


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
