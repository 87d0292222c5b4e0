"""Mini README: Period aggregation of services and expenses.

Structure:
    * PeriodAggregate - totals and filtered records for one calendar month.
    * aggregate - pure function building a ``PeriodAggregate``.

The fixed salary is folded into ``total_expenses`` as a synthetic cost every
month, whether or not a payroll expense exists. It is never written as an
``Expense`` row. The input collections are filtered, never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from ..configuration import get_settings
from ..logging_utils import get_logger
from .models import Expense, ServiceRecord
from .periods import coerce_date, falls_within, month_bounds, month_key, month_label
from .rounding import standard_round

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class PeriodAggregate:
    """Financial snapshot of a calendar month."""

    month: int
    year: int
    label: str
    month_year: str
    start: date
    end: date
    total_revenue: float
    total_expenses: float
    hectares_total: float
    fixed_salary: float
    services: List[ServiceRecord] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)

    @property
    def net_result(self) -> float:
        """Revenue minus costs (salary included) before any distribution."""

        return standard_round(self.total_revenue - self.total_expenses)


def aggregate(
    month: int,
    year: int,
    services: Iterable[ServiceRecord],
    expenses: Iterable[Expense],
    *,
    fixed_salary: Optional[float] = None,
) -> PeriodAggregate:
    """Filter records into the month and compute revenue, costs and serviced area."""

    start, end = month_bounds(month, year)
    salary = get_settings().fixed_salary if fixed_salary is None else float(fixed_salary)

    period_services = [
        service for service in services if falls_within(coerce_date(service.date), start, end)
    ]
    period_expenses = [
        expense for expense in expenses if falls_within(coerce_date(expense.date), start, end)
    ]

    total_revenue = standard_round(sum(service.total_value for service in period_services))
    hectares_total = standard_round(sum(service.hectares for service in period_services))
    total_expenses = standard_round(
        sum(expense.amount for expense in period_expenses) + salary
    )

    LOGGER.debug(
        "Aggregated %s: services=%s expenses=%s revenue=%.2f costs=%.2f hectares=%.2f",
        month_key(month, year),
        len(period_services),
        len(period_expenses),
        total_revenue,
        total_expenses,
        hectares_total,
    )
    return PeriodAggregate(
        month=start.month,
        year=start.year,
        label=month_label(month, year),
        month_year=month_key(month, year),
        start=start,
        end=end,
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        hectares_total=hectares_total,
        fixed_salary=salary,
        services=period_services,
        expenses=period_expenses,
    )
