"""Mini README: Settlement maths for DroneFlow.

This package holds the pure parts of the monthly settlement engine: the two
rounding rules, calendar helpers, domain records, the period aggregator, the
profit distribution calculator, dashboard metrics and the contribution
ledger. Nothing here reads ambient state; callers pass the collections in.
"""

from .aggregator import PeriodAggregate, aggregate
from .beneficiaries import COMPANY_PAYER, DEFAULT_ROSTER, Beneficiary, BeneficiaryRole
from .distribution import distribute, grand_total
from .ledger import ContributionLedger, running_balance, total_contributed
from .models import (
    ApplicationType,
    Area,
    ClosedMonth,
    Client,
    Contribution,
    Expense,
    PartnerSummary,
    ServiceRecord,
    generate_id,
)
from .rounding import generous_round, standard_round

__all__ = [
    "COMPANY_PAYER",
    "DEFAULT_ROSTER",
    "ApplicationType",
    "Area",
    "Beneficiary",
    "BeneficiaryRole",
    "ClosedMonth",
    "Client",
    "Contribution",
    "ContributionLedger",
    "Expense",
    "PartnerSummary",
    "PeriodAggregate",
    "ServiceRecord",
    "aggregate",
    "distribute",
    "generate_id",
    "generous_round",
    "grand_total",
    "running_balance",
    "standard_round",
    "total_contributed",
]
