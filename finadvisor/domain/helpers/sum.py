from datetime import datetime
from typing import Iterable, Optional

from finadvisor.domain.models import Expense, Income


def sum_amounts_in_range(
    records: Iterable[Expense | Income],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> float:
    total = 0.0
    # Compare on calendar days, both ends inclusive
    start_date = start.date() if start else None
    end_date = end.date() if end else None
    for r in records:
        if r.fecha is None:
            continue
        r_date = r.fecha.date() if isinstance(r.fecha, datetime) else r.fecha
        if start_date and r_date < start_date:
            continue
        if end_date and r_date > end_date:
            continue
        total += r.monto
    return round(total, 2)


def get_balance(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> float:
    """
    Incomes minus expenses for the given (optional) date range.
    """
    return round(
        sum_amounts_in_range(incomes, start, end)
        - sum_amounts_in_range(expenses, start, end),
        2,
    )
