"""Mini README: Perpetual contribution ledger per beneficiary.

Structure:
    * total_contributed - pure sum of one beneficiary's contributions.
    * running_balance - current period result plus all-time contributions.
    * ContributionLedger - append/remove log persisted through a repository.

Contributions are how a beneficiary pays down a negative balance. They are
never attached to a month and never cleared when a month closes, so a
balance mixes the all-time ledger with a single period's distribution.
Totals are recomputed from the stored records on every call.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from ..errors import MalformedInputError, RecordNotFoundError, ValidationError
from ..logging_utils import get_logger
from ..storage.base import Repository
from .beneficiaries import DEFAULT_ROSTER, Beneficiary, find_beneficiary
from .models import Contribution, PartnerSummary, generate_id
from .periods import coerce_date
from .rounding import standard_round

LOGGER = get_logger(__name__)


def total_contributed(contributions: Iterable[Contribution], beneficiary: str) -> float:
    """Sum of the contributions recorded for ``beneficiary``."""

    return standard_round(
        sum(entry.amount for entry in contributions if entry.partner_name == beneficiary)
    )


def running_balance(summary: PartnerSummary, contributions: Iterable[Contribution]) -> float:
    """What the beneficiary currently owes (negative) or is owed (positive)."""

    return standard_round(
        summary.net_profit
        + (summary.salary or 0.0)
        + total_contributed(contributions, summary.short_id)
    )


class ContributionLedger:
    """Record and query beneficiary contributions."""

    def __init__(
        self,
        repository: Repository[Contribution],
        *,
        beneficiaries: Sequence[Beneficiary] = DEFAULT_ROSTER,
    ) -> None:
        self._repository = repository
        self._beneficiaries = beneficiaries
        LOGGER.debug("Contribution ledger initialised on '%s'", repository.entity)

    def add_contribution(
        self,
        beneficiary: str,
        amount: float,
        contributed_on: Optional[object] = None,
        notes: str = "",
    ) -> Contribution:
        """Append a contribution for a non-reserve beneficiary.

        The amount is standard-rounded and must be positive.
        """

        partner = find_beneficiary(beneficiary, self._beneficiaries)
        if partner.is_reserve:
            raise ValidationError(
                f"{partner.short_id} is the reserve fund and cannot record contributions."
            )
        try:
            rounded = standard_round(float(amount))
        except (TypeError, ValueError) as error:
            raise MalformedInputError("amount", amount, "expected a number") from error
        if not rounded > 0:
            raise ValidationError("Contribution amount must be greater than zero.")
        contribution = Contribution(
            contribution_id=generate_id("con"),
            partner_name=partner.short_id,
            amount=rounded,
            date=coerce_date(contributed_on if contributed_on is not None else date.today()),
            notes=notes or "",
        )
        self._repository.insert(contribution).unwrap()
        LOGGER.info(
            "Recorded contribution %s of %.2f for %s",
            contribution.contribution_id,
            contribution.amount,
            partner.short_id,
        )
        return contribution

    def remove_contribution(self, contribution_id: str) -> Contribution:
        """Delete one contribution, raising when the identifier is unknown."""

        removed = self._repository.delete_by_id(contribution_id).unwrap()
        if not removed:
            raise RecordNotFoundError(f"Contribution {contribution_id} not found")
        LOGGER.info("Removed contribution %s", contribution_id)
        return removed[0]

    def list_contributions(self, beneficiary: Optional[str] = None) -> List[Contribution]:
        """Return contributions, most recent first, optionally for one beneficiary."""

        contributions = self._repository.list_all().unwrap()
        if beneficiary is not None:
            short_id = find_beneficiary(beneficiary, self._beneficiaries).short_id
            contributions = [entry for entry in contributions if entry.partner_name == short_id]
        return sorted(
            contributions,
            key=lambda entry: (entry.date, entry.contribution_id),
            reverse=True,
        )

    def total_contributed(self, beneficiary: str) -> float:
        short_id = find_beneficiary(beneficiary, self._beneficiaries).short_id
        return total_contributed(self._repository.list_all().unwrap(), short_id)

    def running_balance(self, beneficiary: str, summary: PartnerSummary) -> float:
        """Balance of ``beneficiary`` on top of the given period summary."""

        short_id = find_beneficiary(beneficiary, self._beneficiaries).short_id
        if summary.short_id != short_id:
            raise ValidationError(
                f"Summary for {summary.short_id!r} does not belong to {short_id!r}."
            )
        return running_balance(summary, self._repository.list_all().unwrap())

    def export_balances(self, summaries: Iterable[PartnerSummary]) -> List[Dict[str, object]]:
        """Merge a period's summaries with the ledger for JSON responses."""

        contributions = self._repository.list_all().unwrap()
        exported: List[Dict[str, object]] = []
        for summary in summaries:
            contributed = total_contributed(contributions, summary.short_id)
            balance = running_balance(summary, contributions)
            exported.append(
                {
                    **summary.as_dict(),
                    "total_contributed": contributed,
                    "balance": balance,
                    "owes": balance < 0,
                }
            )
        return exported
