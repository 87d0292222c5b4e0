"""Mini README: Profit distribution across the four beneficiaries.

Structure:
    * distribute - one ``PartnerSummary`` per roster entry, in roster order.
    * grand_total - net profit plus salary, the amount actually due.

Rules applied per beneficiary:
    1. Gross share is a quarter of (revenue - costs), rounded for each
       beneficiary from the same base. The four shares can drift from the
       pool by a cent; that drift is kept as-is.
    2. Field partners are charged the per-hectare rate for services on the
       client linked to them.
    3. Expenses the beneficiary paid personally are reimbursed.
    4. Net profit = share + reimbursements - deductions.
    5. The salaried beneficiary carries the fixed salary in ``salary``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..configuration import get_settings
from ..logging_utils import get_logger
from .aggregator import PeriodAggregate
from .beneficiaries import DEFAULT_ROSTER, Beneficiary
from .models import Client, PartnerSummary
from .rounding import standard_round

LOGGER = get_logger(__name__)

SHARE_COUNT = 4


def _linked_client(beneficiary: Beneficiary, clients: Sequence[Client]) -> Optional[Client]:
    for client in clients:
        if client.partner_name == beneficiary.short_id:
            return client
    return None


def distribute(
    period: PeriodAggregate,
    clients: Iterable[Client] = (),
    *,
    beneficiaries: Sequence[Beneficiary] = DEFAULT_ROSTER,
    per_hectare_rate: Optional[float] = None,
    fixed_salary: Optional[float] = None,
) -> List[PartnerSummary]:
    """Split the period's result into one summary per beneficiary."""

    settings = get_settings()
    rate = settings.per_hectare_deduction_rate if per_hectare_rate is None else float(per_hectare_rate)
    salary = period.fixed_salary if fixed_salary is None else float(fixed_salary)
    client_list = list(clients)

    summaries: List[PartnerSummary] = []
    for beneficiary in beneficiaries:
        gross_profit = standard_round((period.total_revenue - period.total_expenses) / SHARE_COUNT)

        hectares = 0.0
        deductions = 0.0
        if beneficiary.is_field_partner:
            client = _linked_client(beneficiary, client_list)
            if client is not None:
                hectares = standard_round(
                    sum(s.hectares for s in period.services if s.client_id == client.client_id)
                )
                deductions = standard_round(hectares * rate)

        reimbursements = standard_round(
            sum(e.amount for e in period.expenses if e.paid_by == beneficiary.short_id)
        )
        net_profit = standard_round(gross_profit + reimbursements - deductions)

        summaries.append(
            PartnerSummary(
                name=beneficiary.name,
                short_id=beneficiary.short_id,
                gross_profit=gross_profit,
                deductions=deductions,
                reimbursements=reimbursements,
                net_profit=net_profit,
                salary=salary if beneficiary.is_salaried else None,
                hectares=hectares,
            )
        )

    LOGGER.debug(
        "Distributed %s across %s beneficiaries: %s",
        period.month_year,
        len(summaries),
        {summary.short_id: summary.net_profit for summary in summaries},
    )
    return summaries


def grand_total(summary: PartnerSummary) -> float:
    """Net profit plus any salary carried by the summary."""

    return standard_round(summary.net_profit + (summary.salary or 0.0))
