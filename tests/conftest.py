"""Mini README: Shared fixtures for the DroneFlow test-suite.

Structure:
    * make_service / make_expense - terse record builders.
    * clients - the three demo farms (two partner farms, one independent).
    * workspace - a workspace on a fresh in-memory store with demo clients.
"""

from __future__ import annotations

from typing import List

import pytest

from droneflow.finance.models import ApplicationType, Client, Expense, ServiceRecord
from droneflow.records.clients import DEMO_CLIENTS
from droneflow.storage import create_store
from droneflow.workspace import Workspace, open_workspace

_counter = {"value": 0}


def _next(prefix: str) -> str:
    _counter["value"] += 1
    return f"{prefix}_{_counter['value']:04d}"


def make_service(
    on: str,
    hectares: float,
    unit_price: float,
    *,
    client_id: str = "c3",
    area_id: str = "a4",
) -> ServiceRecord:
    return ServiceRecord(
        service_id=_next("svc"),
        date=on,
        client_id=client_id,
        client_name=f"Client {client_id}",
        area_id=area_id,
        area_name=f"Area {area_id}",
        hectares=hectares,
        type=ApplicationType.SPRAYING,
        unit_price=unit_price,
    )


def make_expense(on: str, amount: float, *, paid_by: str = "Company", closed: bool = False) -> Expense:
    return Expense(
        expense_id=_next("exp"),
        description="Fuel run",
        amount=amount,
        category="Fuel",
        date=on,
        paid_by=paid_by,
        closed=closed,
    )


@pytest.fixture
def clients() -> List[Client]:
    return [Client.from_dict(payload) for payload in DEMO_CLIENTS]


@pytest.fixture
def workspace() -> Workspace:
    space = open_workspace(create_store("memory"), fixed_salary=5000.0, per_hectare_rate=100.0)
    space.clients.seed_demo_clients()
    return space
