"""Mini README: Tests covering the contribution ledger.

Structure:
    * test_contribution_clears_negative_balance - -250 plus 250 is exactly 0.0.
    * test_totals_only_count_surviving_records - add/remove interleavings.
    * test_contribution_validation - bad amounts and beneficiaries are rejected.
    * test_reserve_fund_cannot_contribute - the reserve never takes repayments.
"""

from __future__ import annotations

import math

import pytest

from droneflow.errors import RecordNotFoundError, ValidationError
from droneflow.finance.models import PartnerSummary
from droneflow.finance.ledger import total_contributed


def _summary(short_id: str, net_profit: float, salary=None) -> PartnerSummary:
    return PartnerSummary(
        name=short_id,
        short_id=short_id,
        gross_profit=750.0,
        deductions=0.0,
        reimbursements=0.0,
        net_profit=net_profit,
        salary=salary,
    )


def test_contribution_clears_negative_balance(workspace) -> None:
    """A contribution equal to the shortfall lands the balance on a clean zero."""

    ledger = workspace.ledger
    summary = _summary("Kaká", -250.0)

    assert ledger.running_balance("Kaká", summary) == pytest.approx(-250.0)

    ledger.add_contribution("Kaká", 250, "2024-06-02", "Paid back May shortfall")
    balance = ledger.running_balance("Kaká", summary)

    assert balance == 0.0
    assert math.copysign(1.0, balance) == 1.0


def test_running_balance_includes_salary(workspace) -> None:
    summary = _summary("Geraldo", 750.0, salary=5000.0)
    assert workspace.ledger.running_balance("Geraldo", summary) == pytest.approx(5750.0)


def test_totals_only_count_surviving_records(workspace) -> None:
    ledger = workspace.ledger
    first = ledger.add_contribution("Patrick", 100.10, "2024-01-01")
    ledger.add_contribution("Kaká", 999, "2024-01-02")
    second = ledger.add_contribution("Patrick", 0.2, "2024-01-03")
    ledger.remove_contribution(first.contribution_id)
    ledger.add_contribution("Patrick", 33.333, "2024-01-04")

    assert ledger.total_contributed("Patrick") == pytest.approx(33.53)
    assert ledger.total_contributed("patrick") == pytest.approx(33.53)
    surviving = ledger.list_contributions("Patrick")
    assert [entry.amount for entry in surviving] == [33.33, 0.2]
    assert second.contribution_id in {entry.contribution_id for entry in surviving}


def test_totals_are_order_independent(workspace) -> None:
    contributions = [
        workspace.ledger.add_contribution("Kaká", amount, "2024-02-01")
        for amount in (0.1, 0.2, 10.05, 3.3)
    ]
    forward = total_contributed(contributions, "Kaká")
    backward = total_contributed(list(reversed(contributions)), "Kaká")
    assert forward == backward == 13.65


def test_contribution_validation(workspace) -> None:
    ledger = workspace.ledger
    with pytest.raises(ValidationError):
        ledger.add_contribution("Kaká", 0)
    with pytest.raises(ValidationError):
        ledger.add_contribution("Kaká", -10)
    with pytest.raises(ValidationError):
        ledger.add_contribution("Nobody", 10)
    with pytest.raises(ValidationError):
        ledger.add_contribution("Kaká", "ten")
    with pytest.raises(RecordNotFoundError):
        ledger.remove_contribution("con_missing")


def test_balance_rejects_summary_of_another_beneficiary(workspace) -> None:
    with pytest.raises(ValidationError):
        workspace.ledger.running_balance("Kaká", _summary("Patrick", 10.0))


def test_contributions_survive_month_close(workspace) -> None:
    workspace.ledger.add_contribution("Kaká", 40, "2024-05-10")
    workspace.settlements.close_month(5, 2024)
    assert workspace.ledger.total_contributed("Kaká") == pytest.approx(40.0)


def test_export_balances_flags_who_owes(workspace) -> None:
    workspace.ledger.add_contribution("Kaká", 50, "2024-05-10")
    exported = workspace.ledger.export_balances([_summary("Kaká", -250.0), _summary("Reserva", 10.0)])
    assert exported[0]["balance"] == pytest.approx(-200.0)
    assert exported[0]["owes"] is True
    assert exported[1]["total_contributed"] == 0.0
    assert exported[1]["owes"] is False


def test_reserve_fund_cannot_contribute(workspace) -> None:
    with pytest.raises(ValidationError):
        workspace.ledger.add_contribution("Reserva", 100, "2024-05-01")
    assert workspace.ledger.list_contributions() == []
