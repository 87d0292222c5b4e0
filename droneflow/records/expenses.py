"""Mini README: Operating costs and their lock flags.

Structure:
    * EXPENSE_CATEGORIES - the categories offered to operators.
    * ExpenseBook - add, edit, delete and list expenses.

An expense created inside an already-settled month starts locked. Locked
expenses cannot be edited or deleted until their month is reopened.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..errors import RecordNotFoundError, ValidationError
from ..finance.beneficiaries import COMPANY_PAYER, DEFAULT_ROSTER, Beneficiary, allowed_payers
from ..finance.models import Expense, generate_id
from ..finance.periods import coerce_date, falls_within, month_bounds
from ..finance.rounding import generous_round
from ..logging_utils import get_logger
from ..settlement.lifecycle import SettlementService
from ..storage.base import Repository

LOGGER = get_logger(__name__)

EXPENSE_CATEGORIES = (
    "Fuel",
    "Drone maintenance",
    "Products",
    "Logistics",
    "Marketing",
    "Taxes",
    "Miscellaneous",
)


class ExpenseBook:
    """Manage expenses through a repository, honouring settled months."""

    def __init__(
        self,
        repository: Repository[Expense],
        settlements: SettlementService,
        *,
        beneficiaries: Sequence[Beneficiary] = DEFAULT_ROSTER,
    ) -> None:
        self._repository = repository
        self._settlements = settlements
        self._payers = allowed_payers(beneficiaries)

    def _normalise_payer(self, paid_by: Optional[str]) -> str:
        wanted = (paid_by or COMPANY_PAYER).strip().lower()
        for payer in self._payers:
            if payer.lower() == wanted:
                return payer
        raise ValidationError(f"Unknown payer {paid_by!r}; expected one of {self._payers}.")

    @staticmethod
    def _amount(value: Any) -> float:
        try:
            amount = generous_round(float(value))
        except (TypeError, ValueError) as error:
            raise ValidationError(f"Amount must be a number, got {value!r}.") from error
        if not amount > 0:
            raise ValidationError("Amount must be greater than zero.")
        return amount

    def get_expense(self, expense_id: str) -> Expense:
        for expense in self._repository.list_all().unwrap():
            if expense.expense_id == expense_id:
                return expense
        raise RecordNotFoundError(f"Expense {expense_id} not found")

    def add_expense(
        self,
        description: str,
        amount: float,
        expense_date: object,
        *,
        category: str = "Miscellaneous",
        paid_by: Optional[str] = COMPANY_PAYER,
    ) -> Expense:
        if not description or not description.strip():
            raise ValidationError("Expense description is required.")
        if not category or not category.strip():
            raise ValidationError("Expense category is required.")
        when = coerce_date(expense_date, "date")
        expense = Expense(
            expense_id=generate_id("exp"),
            description=description.strip(),
            amount=self._amount(amount),
            category=category.strip(),
            date=when,
            paid_by=self._normalise_payer(paid_by),
            closed=self._settlements.is_closed(when.month, when.year),
        )
        self._repository.insert(expense).unwrap()
        LOGGER.info(
            "Added expense %s: %.2f paid by %s%s",
            expense.expense_id,
            expense.amount,
            expense.paid_by,
            " (month already closed)" if expense.closed else "",
        )
        return expense

    def update_expense(self, expense_id: str, **changes: Any) -> Expense:
        """Edit an unlocked expense; moving it into a closed month is rejected."""

        expense = self.get_expense(expense_id)
        if expense.closed:
            raise ValidationError(f"Expense {expense_id} belongs to a closed month.")
        unsupported = set(changes) - {"description", "amount", "category", "date", "paid_by"}
        if unsupported:
            raise ValidationError(f"Cannot update expense fields: {sorted(unsupported)}")

        fields: Dict[str, Any] = {}
        if "description" in changes:
            if not changes["description"] or not str(changes["description"]).strip():
                raise ValidationError("Expense description is required.")
            fields["description"] = str(changes["description"]).strip()
        if "amount" in changes:
            fields["amount"] = self._amount(changes["amount"])
        if "category" in changes:
            if not changes["category"] or not str(changes["category"]).strip():
                raise ValidationError("Expense category is required.")
            fields["category"] = str(changes["category"]).strip()
        if "paid_by" in changes:
            fields["paid_by"] = self._normalise_payer(changes["paid_by"])
        if "date" in changes:
            when = coerce_date(changes["date"], "date")
            if self._settlements.is_closed(when.month, when.year):
                raise ValidationError(f"Cannot move expense into closed month {when.month}/{when.year}.")
            fields["date"] = when

        updated = self._repository.update_fields(expense_id, fields).unwrap()
        if not updated:
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        return updated[0]

    def delete_expense(self, expense_id: str) -> Expense:
        expense = self.get_expense(expense_id)
        if expense.closed:
            raise ValidationError(f"Expense {expense_id} belongs to a closed month.")
        removed = self._repository.delete_by_id(expense_id).unwrap()
        LOGGER.info("Deleted expense %s", expense_id)
        return removed[0]

    def list_expenses(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        *,
        search: Optional[str] = None,
    ) -> List[Expense]:
        """Return expenses, newest first, filtered by month and description/category."""

        expenses = self._repository.list_all().unwrap()
        if month is not None and year is not None:
            start, end = month_bounds(month, year)
            expenses = [expense for expense in expenses if falls_within(expense.date, start, end)]
        if search and search.strip():
            term = search.strip().lower()
            expenses = [
                expense
                for expense in expenses
                if term in expense.description.lower() or term in expense.category.lower()
            ]
        return sorted(expenses, key=lambda expense: (expense.date, expense.expense_id), reverse=True)
