"""Mini README: Tests for the profit distribution calculator.

Covers the reference scenario (one field-partner deduction, salary and
reserve), reimbursements, per-share rounding drift and roster ordering.
"""

from __future__ import annotations

import pytest

from droneflow.finance.aggregator import aggregate
from droneflow.finance.distribution import distribute, grand_total
from droneflow.finance.rounding import standard_round

from conftest import make_expense, make_service


def _reference_month(clients, expenses=None):
    services = [
        make_service("2024-05-03", 10, 100, client_id="c1", area_id="a1"),
        make_service("2024-05-04", 90, 100, client_id="c3", area_id="a4"),
    ]
    expenses = expenses if expenses is not None else [make_expense("2024-05-05", 2000)]
    period = aggregate(5, 2024, services, expenses, fixed_salary=5000)
    return period, distribute(period, clients, per_hectare_rate=100)


def test_reference_scenario(clients) -> None:
    """Revenue 10,000 and costs 7,000 give four shares of 750."""

    period, summaries = _reference_month(clients)
    by_id = {summary.short_id: summary for summary in summaries}

    assert period.total_revenue == pytest.approx(10000.0)
    assert period.total_expenses == pytest.approx(7000.0)
    assert [summary.gross_profit for summary in summaries] == [750.0] * 4

    assert by_id["Kaká"].hectares == pytest.approx(10.0)
    assert by_id["Kaká"].deductions == pytest.approx(1000.0)
    assert by_id["Kaká"].net_profit == pytest.approx(-250.0)

    assert by_id["Patrick"].deductions == 0.0
    assert by_id["Patrick"].net_profit == pytest.approx(750.0)

    assert by_id["Geraldo"].salary == pytest.approx(5000.0)
    assert by_id["Geraldo"].net_profit == pytest.approx(750.0)
    assert grand_total(by_id["Geraldo"]) == pytest.approx(5750.0)

    assert by_id["Reserva"].salary is None
    assert by_id["Reserva"].hectares == 0.0


def test_summaries_follow_roster_order(clients) -> None:
    _, summaries = _reference_month(clients)
    assert [summary.short_id for summary in summaries] == ["Kaká", "Patrick", "Geraldo", "Reserva"]


def test_personally_paid_expenses_are_reimbursed(clients) -> None:
    expenses = [make_expense("2024-05-05", 1700), make_expense("2024-05-06", 300, paid_by="Patrick")]
    _, summaries = _reference_month(clients, expenses)
    patrick = next(summary for summary in summaries if summary.short_id == "Patrick")

    assert patrick.reimbursements == pytest.approx(300.0)
    assert patrick.net_profit == pytest.approx(1050.0)


def test_independent_share_rounding_drift_is_preserved() -> None:
    """Each share rounds the same base; the four together may miss the pool by cents."""

    period = aggregate(5, 2024, [make_service("2024-05-01", 1, 10.01)], [], fixed_salary=0)
    summaries = distribute(period, [], per_hectare_rate=100)
    share = standard_round((period.total_revenue - period.total_expenses) / 4)

    assert len(summaries) == 4
    assert all(summary.gross_profit == share == 2.5 for summary in summaries)
    assert sum(summary.gross_profit for summary in summaries) == pytest.approx(4 * share)
    assert sum(summary.gross_profit for summary in summaries) != pytest.approx(period.total_revenue)


def test_partner_without_linked_client_has_no_deduction() -> None:
    period = aggregate(5, 2024, [make_service("2024-05-01", 10, 100, client_id="c1")], [], fixed_salary=0)
    summaries = distribute(period, [], per_hectare_rate=100)
    assert all(summary.deductions == 0.0 for summary in summaries)
