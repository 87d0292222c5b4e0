"""Mini README: Open/closed lifecycle of monthly settlements.

Structure:
    * MonthComputation - live aggregate and distribution for a month.
    * SettlementService - compute, close, reopen and list settlements.

A month is Open while no ``ClosedMonth`` exists for its ``"M/YYYY"`` key and
Closed once one does. Closing writes the snapshot first and then flags the
month's expenses; the two writes are not transactional. A failure after the
snapshot is stored is raised as ``PartialSettlementError`` so the operator
can repair the flags with ``resync_expense_flags``.

Reopening recomputes the date range from the key rather than reading the
snapshot, so expenses added to the month after it was closed are unlocked
as well.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from ..errors import PartialSettlementError, RecordNotFoundError, StoreError, ValidationError
from ..finance.aggregator import PeriodAggregate, aggregate
from ..finance.beneficiaries import DEFAULT_ROSTER, Beneficiary
from ..finance.distribution import distribute
from ..finance.models import ClosedMonth, Expense, PartnerSummary, generate_id
from ..finance.periods import falls_within, month_bounds, month_key, parse_month_key
from ..finance.rounding import standard_round
from ..logging_utils import get_logger
from ..storage.store import Store

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class MonthComputation:
    """Live figures for a month, plus its stored settlement when closed."""

    period: PeriodAggregate
    summaries: List[PartnerSummary]
    closed_month: Optional[ClosedMonth] = None

    @property
    def is_closed(self) -> bool:
        return self.closed_month is not None

    def as_dict(self) -> Dict[str, object]:
        return {
            "month_year": self.period.month_year,
            "label": self.period.label,
            "total_revenue": self.period.total_revenue,
            "total_expenses": self.period.total_expenses,
            "net_profit": self.period.net_result,
            "hectares": self.period.hectares_total,
            "service_count": len(self.period.services),
            "expense_count": len(self.period.expenses),
            "partner_summaries": [summary.as_dict() for summary in self.summaries],
            "is_closed": self.is_closed,
        }


def _closed_month_order(closed: ClosedMonth) -> tuple:
    month, year = parse_month_key(closed.month_year)
    return (year, month)


class SettlementService:
    """Coordinate month settlements against a ``Store``."""

    def __init__(
        self,
        store: Store,
        *,
        beneficiaries: Sequence[Beneficiary] = DEFAULT_ROSTER,
        fixed_salary: Optional[float] = None,
        per_hectare_rate: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.beneficiaries = beneficiaries
        self.fixed_salary = fixed_salary
        self.per_hectare_rate = per_hectare_rate
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def compute_month(self, month: int, year: int) -> MonthComputation:
        """Aggregate and distribute a month from live records."""

        period = aggregate(
            month,
            year,
            self.store.services.list_all().unwrap(),
            self.store.expenses.list_all().unwrap(),
            fixed_salary=self.fixed_salary,
        )
        summaries = distribute(
            period,
            self.store.clients.list_all().unwrap(),
            beneficiaries=self.beneficiaries,
            per_hectare_rate=self.per_hectare_rate,
        )
        return MonthComputation(
            period=period,
            summaries=summaries,
            closed_month=self.find_closed_month(period.month_year),
        )

    def list_closed_months(self) -> List[ClosedMonth]:
        """Return settlements, most recent month first."""

        closed_months = self.store.closed_months.list_all().unwrap()
        return sorted(closed_months, key=_closed_month_order, reverse=True)

    def find_closed_month(self, key: str) -> Optional[ClosedMonth]:
        month, year = parse_month_key(key)
        normalised = month_key(month, year)
        for closed in self.store.closed_months.list_all().unwrap():
            if closed.month_year == normalised:
                return closed
        return None

    def get_closed_month(self, key: str) -> ClosedMonth:
        closed = self.find_closed_month(key)
        if closed is None:
            raise RecordNotFoundError(f"Month {key} is not closed")
        return closed

    def is_closed(self, month: int, year: int) -> bool:
        return self.find_closed_month(month_key(month, year)) is not None

    def close_month(self, month: int, year: int) -> ClosedMonth:
        """Persist a frozen snapshot of the month and lock its expenses."""

        key = month_key(month, year)
        if self.find_closed_month(key) is not None:
            raise ValidationError(f"Month {key} is already closed.")

        computation = self.compute_month(month, year)
        period = computation.period
        snapshot_expenses: List[Expense] = copy.deepcopy(period.expenses)
        for expense in snapshot_expenses:
            expense.closed = True
        closed = ClosedMonth(
            closed_month_id=generate_id("cm"),
            month_year=key,
            label=period.label,
            total_revenue=period.total_revenue,
            total_expenses=period.total_expenses,
            net_profit=standard_round(period.total_revenue - period.total_expenses),
            hectares=period.hectares_total,
            services=copy.deepcopy(period.services),
            expenses=snapshot_expenses,
            partner_summaries=copy.deepcopy(computation.summaries),
            closed_at=self._clock(),
        )

        self.store.closed_months.insert(closed).unwrap()
        LOGGER.info(
            "Closed %s: revenue=%.2f costs=%.2f services=%s expenses=%s",
            key,
            closed.total_revenue,
            closed.total_expenses,
            len(closed.services),
            len(closed.expenses),
        )

        start, end = period.start, period.end
        flagged = self.store.expenses.update_where(
            lambda expense: falls_within(expense.date, start, end), {"closed": True}
        )
        if not flagged.ok:
            LOGGER.error("Month %s closed but expenses were not locked: %s", key, flagged.message)
            raise PartialSettlementError(
                f"Month {key} was closed but its expenses could not be locked: {flagged.message}",
                closed_month=closed,
            )
        LOGGER.debug("Locked %s expenses for %s", len(flagged.records), key)
        return closed

    def reopen_month(self, month_year: str) -> ClosedMonth:
        """Delete the month's snapshot and unlock every expense dated inside it."""

        month, year = parse_month_key(month_year)
        key = month_key(month, year)
        closed = self.find_closed_month(key)
        if closed is None:
            raise ValidationError(f"Month {key} is not closed.")

        self.store.closed_months.delete_by_id(closed.closed_month_id).unwrap()
        start, end = month_bounds(month, year)
        unlocked = self.store.expenses.update_where(
            lambda expense: falls_within(expense.date, start, end), {"closed": False}
        )
        if not unlocked.ok:
            LOGGER.error("Month %s reopened but expenses stay locked: %s", key, unlocked.message)
            raise StoreError(
                f"Month {key} was reopened but its expenses could not be unlocked: {unlocked.message}"
            )
        LOGGER.info("Reopened %s and unlocked %s expenses", key, len(unlocked.records))
        return closed

    def resync_expense_flags(self) -> int:
        """Set every expense's ``closed`` flag from the current settlements.

        Returns the number of expenses whose flag changed.
        """

        ranges = [month_bounds(*parse_month_key(c.month_year)) for c in self.list_closed_months()]

        def should_be_closed(expense: Expense) -> bool:
            return any(falls_within(expense.date, start, end) for start, end in ranges)

        locked = self.store.expenses.update_where(
            lambda expense: should_be_closed(expense) and not expense.closed, {"closed": True}
        ).unwrap()
        unlocked = self.store.expenses.update_where(
            lambda expense: not should_be_closed(expense) and expense.closed, {"closed": False}
        ).unwrap()
        changed = len(locked) + len(unlocked)
        if changed:
            LOGGER.warning("Resynchronised %s expense lock flags", changed)
        return changed
