"""
Display helpers for the client: dates, amounts and goal progress.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from dateutil.parser import isoparse

from finadvisor.domain.helpers.sum import get_balance, sum_amounts_in_range
from finadvisor.domain.models import Expense, Goal, Income

UNKNOWN_DATE = "Fecha Desconocida"


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return isoparse(value)
    except (ValueError, OverflowError):
        return None


def format_date(value: Any, fmt: str = "%d/%m/%Y") -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime(fmt) if parsed else UNKNOWN_DATE


def format_amount(monto: float, sign: str = "") -> str:
    return f"{sign}${monto:.2f}"


def format_expense_amount(expense: Expense) -> str:
    return format_amount(expense.monto, "-")


def format_income_amount(income: Income) -> str:
    return format_amount(income.monto, "+")


def goal_progress(monto_actual: float, monto_meta: float) -> float:
    """Percentage of the target reached, clamped to [0, 100], one decimal."""
    if not monto_meta or monto_meta <= 0:
        return 0.0
    progress = (monto_actual or 0) / monto_meta * 100
    return round(min(100.0, max(0.0, progress)), 1)


def format_goal(goal: Goal) -> str:
    progress = goal_progress(goal.monto_actual, goal.monto_meta)
    return (
        f"{goal.nombre}: {format_amount(goal.monto_actual)} / "
        f"{format_amount(goal.monto_meta)} ({progress:.1f}%)"
    )


@dataclass
class Summary:
    total_gastos: float
    total_ingresos: float
    balance: float


def summarize(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Summary:
    expenses = list(expenses)
    incomes = list(incomes)
    return Summary(
        total_gastos=sum_amounts_in_range(expenses, start, end),
        total_ingresos=sum_amounts_in_range(incomes, start, end),
        balance=get_balance(incomes, expenses, start, end),
    )
