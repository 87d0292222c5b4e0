"""Mini README: Tests for client, service and expense management.

These tests confirm the rounding applied to operator input, the defaults
taken from clients and areas, partner links, and the expense locks that
follow settled months.
"""

from __future__ import annotations

import pytest

from droneflow.errors import RecordNotFoundError, ValidationError
from droneflow.finance.models import ApplicationType


def test_record_service_fills_defaults_from_partner_area(workspace) -> None:
    """Partner farms default to the area size and the internal rate."""

    service = workspace.services.record_service("2024-05-03", "c1", "a1", "Spraying")

    assert service.hectares == pytest.approx(45.5)
    assert service.unit_price == pytest.approx(100.0)
    assert service.total_value == pytest.approx(4550.0)
    assert service.client_name == "Boa Vista Farm (Kaká)"
    assert service.area_name == "Plot 01 - Headquarters"
    assert service.type is ApplicationType.SPRAYING


def test_record_service_rounds_generously(workspace) -> None:
    service = workspace.services.record_service(
        "2024-05-03", "c3", "a4", ApplicationType.DISPERSAL, hectares=49.96, unit_price=80.999
    )
    assert service.hectares == 50.0
    assert service.unit_price == 81.0
    assert service.total_value == 4050.0


def test_record_service_validation(workspace) -> None:
    with pytest.raises(ValidationError):
        workspace.services.record_service("2024-05-03", "c3", "a4", hectares=10)
    with pytest.raises(ValidationError):
        workspace.services.record_service("2024-05-03", "c3", "a1", unit_price=10)
    with pytest.raises(ValidationError):
        workspace.services.record_service("2024-05-03", "c3", "a4", hectares=0, unit_price=10)
    with pytest.raises(ValidationError):
        workspace.services.record_service("2024-05-03", "c3", "a4", "seeding", unit_price=10)
    with pytest.raises(RecordNotFoundError):
        workspace.services.record_service("2024-05-03", "nope", "a4", unit_price=10)


def test_service_names_do_not_follow_client_renames(workspace) -> None:
    service = workspace.services.record_service("2024-05-03", "c3", "a4", unit_price=90)
    workspace.clients.update_client("c3", name="Silva & Sons")
    stored = workspace.services.list_services(5, 2024)[0]
    assert stored.service_id == service.service_id
    assert stored.client_name == "Silva Independent Grower"


def test_areas_are_rounded_and_cascade_with_client(workspace) -> None:
    client = workspace.clients.add_client("Nova Era Farm", "(64) 98888-0000")
    area = workspace.clients.add_area(client.client_id, "North", 19.97)
    assert area.hectares == 20.0

    updated = workspace.clients.update_area(client.client_id, area.area_id, hectares=7.123)
    assert updated.hectares == pytest.approx(7.12)

    with pytest.raises(ValidationError):
        workspace.clients.add_area(client.client_id, "Empty", 0)

    removed = workspace.clients.delete_client(client.client_id)
    assert [item.area_id for item in removed.areas] == [area.area_id]
    with pytest.raises(RecordNotFoundError):
        workspace.clients.get_client(client.client_id)


def test_partner_links_are_unique_and_limited_to_field_partners(workspace) -> None:
    with pytest.raises(ValidationError):
        workspace.clients.add_client("Second Kaká farm", "123", partner_name="Kaká")
    with pytest.raises(ValidationError):
        workspace.clients.add_client("Operator farm", "123", partner_name="Geraldo")
    assert workspace.clients.find_partner_client("Patrick").client_id == "c2"


def test_list_clients_sorted_and_searchable(workspace) -> None:
    names = [client.name for client in workspace.clients.list_clients()]
    assert names == sorted(names, key=str.lower)
    assert [client.client_id for client in workspace.clients.list_clients("progresso")] == ["c2"]


def test_seed_is_a_noop_on_populated_store(workspace) -> None:
    assert workspace.clients.seed_demo_clients() == []


def test_add_expense_rounds_and_validates(workspace) -> None:
    expense = workspace.expenses.add_expense("Diesel", 199.96, "2024-05-02", category="Fuel", paid_by="kaká")
    assert expense.amount == 200.0
    assert expense.paid_by == "Kaká"
    assert expense.closed is False

    with pytest.raises(ValidationError):
        workspace.expenses.add_expense("Diesel", 0, "2024-05-02")
    with pytest.raises(ValidationError):
        workspace.expenses.add_expense("", 10, "2024-05-02")
    with pytest.raises(ValidationError):
        workspace.expenses.add_expense("Diesel", 10, "2024-05-02", paid_by="Reserva")


def test_closed_expenses_cannot_change(workspace) -> None:
    expense = workspace.expenses.add_expense("Nozzles", 300, "2024-05-02")
    workspace.settlements.close_month(5, 2024)

    with pytest.raises(ValidationError):
        workspace.expenses.update_expense(expense.expense_id, amount=10)
    with pytest.raises(ValidationError):
        workspace.expenses.delete_expense(expense.expense_id)

    workspace.settlements.reopen_month("5/2024")
    updated = workspace.expenses.update_expense(expense.expense_id, amount=310.5, category="Products")
    assert updated.amount == pytest.approx(310.5)
    assert updated.category == "Products"


def test_expense_cannot_move_into_closed_month(workspace) -> None:
    workspace.settlements.close_month(4, 2024)
    expense = workspace.expenses.add_expense("Hangar rent", 900, "2024-05-01")
    with pytest.raises(ValidationError):
        workspace.expenses.update_expense(expense.expense_id, date="2024-04-30")


def test_list_expenses_filters_month_and_search(workspace) -> None:
    workspace.expenses.add_expense("Diesel", 10, "2024-05-02", category="Fuel")
    workspace.expenses.add_expense("Facebook ads", 20, "2024-05-03", category="Marketing")
    workspace.expenses.add_expense("Diesel", 30, "2024-06-03", category="Fuel")

    may = workspace.expenses.list_expenses(5, 2024)
    assert [expense.amount for expense in may] == [20.0, 10.0]
    assert len(workspace.expenses.list_expenses(search="fuel")) == 2
