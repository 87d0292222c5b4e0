"""Mini README: The four profit-sharing beneficiaries and their roles.

Structure:
    * BeneficiaryRole - field partner, salaried operator or reserve fund.
    * Beneficiary - short identifier, display name and role.
    * DEFAULT_ROSTER - the fixed, ordered roster used by distributions.
    * COMPANY_PAYER - ``paid_by`` value for expenses paid from company funds.
    * find_beneficiary / allowed_payers - roster lookups.

The roster order is the order of every distribution result. Field partners
own farms that are also billed as clients; the salaried operator receives the
fixed salary on top of their share; the reserve fund only accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from ..errors import ValidationError

COMPANY_PAYER = "Company"


class BeneficiaryRole(str, Enum):
    """Enumerate the roles a beneficiary can hold."""

    FIELD_PARTNER = "field_partner"
    SALARIED = "salaried"
    RESERVE = "reserve"


@dataclass(frozen=True, slots=True)
class Beneficiary:
    """A profit-sharing party identified by ``short_id``."""

    short_id: str
    name: str
    role: BeneficiaryRole

    @property
    def is_field_partner(self) -> bool:
        return self.role is BeneficiaryRole.FIELD_PARTNER

    @property
    def is_salaried(self) -> bool:
        return self.role is BeneficiaryRole.SALARIED

    @property
    def is_reserve(self) -> bool:
        return self.role is BeneficiaryRole.RESERVE


DEFAULT_ROSTER: Sequence[Beneficiary] = (
    Beneficiary("Kaká", "Kaká (Partner)", BeneficiaryRole.FIELD_PARTNER),
    Beneficiary("Patrick", "Patrick (Partner)", BeneficiaryRole.FIELD_PARTNER),
    Beneficiary("Geraldo", "Geraldo Júnior", BeneficiaryRole.SALARIED),
    Beneficiary("Reserva", "Reserve Fund", BeneficiaryRole.RESERVE),
)


def find_beneficiary(
    short_id: str, roster: Sequence[Beneficiary] = DEFAULT_ROSTER
) -> Beneficiary:
    """Return the roster entry for ``short_id`` (case-insensitive)."""

    wanted = (short_id or "").strip().lower()
    for beneficiary in roster:
        if beneficiary.short_id.lower() == wanted:
            return beneficiary
    raise ValidationError(f"Unknown beneficiary: {short_id!r}")


def allowed_payers(roster: Sequence[Beneficiary] = DEFAULT_ROSTER) -> List[str]:
    """Who may front an expense: the company or any non-reserve beneficiary."""

    return [COMPANY_PAYER] + [b.short_id for b in roster if not b.is_reserve]
