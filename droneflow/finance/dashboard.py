"""Mini README: Headline metrics for the operator dashboard.

Structure:
    * summarise_dashboard - month/year hectares and balances plus the reserve
      fund's accumulated share across settled months.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Optional

from ..configuration import get_settings
from .aggregator import aggregate
from .beneficiaries import DEFAULT_ROSTER
from .models import ClosedMonth, Expense, ServiceRecord
from .periods import months_elapsed_in_year
from .rounding import standard_round


def _reserve_id() -> str:
    return next(b.short_id for b in DEFAULT_ROSTER if b.is_reserve)


def summarise_dashboard(
    today: date,
    services: Iterable[ServiceRecord],
    expenses: Iterable[Expense],
    closed_months: Iterable[ClosedMonth],
    *,
    fixed_salary: Optional[float] = None,
    reserve_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Aggregate current-month and year-to-date figures.

    The yearly balance charges the fixed salary once for every month elapsed
    so far, including the current one. ``bank_balance`` is the sum of the
    reserve fund's net profit over every settled month.
    """

    salary = get_settings().fixed_salary if fixed_salary is None else float(fixed_salary)
    reserve = reserve_id or _reserve_id()
    service_list = list(services)
    expense_list = list(expenses)

    current = aggregate(today.month, today.year, service_list, expense_list, fixed_salary=salary)
    year_services = [s for s in service_list if s.date.year == today.year]
    year_expenses = [e for e in expense_list if e.date.year == today.year]
    year_revenue = sum(s.total_value for s in year_services)
    year_costs = sum(e.amount for e in year_expenses) + salary * months_elapsed_in_year(today)

    bank_balance = 0.0
    for closed in closed_months:
        summary = closed.summary_for(reserve)
        if summary is not None:
            bank_balance += summary.net_profit

    return {
        "label": current.label,
        "hectares_month": current.hectares_total,
        "hectares_year": standard_round(sum(s.hectares for s in year_services)),
        "balance_month": current.net_result,
        "balance_year": standard_round(year_revenue - year_costs),
        "bank_balance": standard_round(bank_balance),
    }
