"""Mini README: Tests for the store backend registry and repositories.

Ensures both built-in backends register, that records round-trip through the
JSON files, and that repository results report failures instead of raising.
"""

from __future__ import annotations

from droneflow.finance.models import Expense
from droneflow.storage import REGISTRY, InMemoryRepository, JsonFileRepository, create_store

from conftest import make_expense


def test_registry_contains_builtin_backends():
    assert list(REGISTRY.available_backends()) == ["json", "memory"]


def test_registry_instantiates_backend(tmp_path):
    repository = REGISTRY.create("JSON", "expenses", Expense, directory=tmp_path)
    assert isinstance(repository, JsonFileRepository)
    assert repository.path == tmp_path / "expenses.json"


def test_json_store_persists_across_instances(tmp_path):
    store = create_store("json", data_directory=tmp_path)
    expense = make_expense("2024-05-05", 120.5, paid_by="Kaká")
    store.expenses.insert(expense).unwrap()

    reopened = create_store("json", data_directory=tmp_path)
    loaded = reopened.expenses.list_all().unwrap()
    assert [item.as_dict() for item in loaded] == [expense.as_dict()]


def test_insert_rejects_duplicate_ids():
    repository = InMemoryRepository("expenses", Expense)
    expense = make_expense("2024-05-05", 10)
    assert repository.insert(expense).ok
    result = repository.insert(expense)
    assert not result.ok
    assert "already exists" in result.message


def test_update_fields_and_delete_report_misses():
    repository = InMemoryRepository("expenses", Expense)
    assert repository.update_fields("missing", {"closed": True}).records == []
    assert repository.delete_by_id("missing").records == []


def test_update_with_unknown_field_is_a_failure():
    repository = InMemoryRepository("expenses", Expense)
    expense = make_expense("2024-05-05", 10)
    repository.insert(expense).unwrap()
    result = repository.update_fields(expense.expense_id, {"colour": "red"})
    assert not result.ok


def test_repository_hands_out_copies():
    repository = InMemoryRepository("expenses", Expense)
    expense = make_expense("2024-05-05", 10)
    repository.insert(expense).unwrap()
    expense.amount = 999
    repository.list_all().unwrap()[0].amount = 555
    assert repository.list_all().unwrap()[0].amount == 10


def test_corrupt_json_file_is_a_failure(tmp_path):
    (tmp_path / "expenses.json").write_text("{not json", encoding="utf-8")
    repository = JsonFileRepository("expenses", Expense, directory=tmp_path)
    result = repository.list_all()
    assert not result.ok
    assert "expenses list failed" in result.message
