"""Mini README: Wiring of the store, engine and record managers.

Structure:
    * Workspace - every service bound to one ``Store``.
    * open_workspace - build a ``Workspace`` from settings or explicit options.

The CLI and the HTTP API both work through a ``Workspace`` so they share one
composition of repositories and settlement constants.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from .configuration import get_settings
from .finance.dashboard import summarise_dashboard
from .finance.ledger import ContributionLedger
from .logging_utils import get_logger
from .records import ClientDirectory, ExpenseBook, ServiceLog
from .settlement import SettlementService
from .storage import Store, create_store

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Workspace:
    """Services sharing a single store."""

    store: Store
    settlements: SettlementService
    ledger: ContributionLedger
    clients: ClientDirectory
    services: ServiceLog
    expenses: ExpenseBook

    def balances(self, month: int, year: int) -> List[Dict[str, Any]]:
        """Each beneficiary's month result merged with the contribution ledger."""

        computation = self.settlements.compute_month(month, year)
        return self.ledger.export_balances(computation.summaries)

    def dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        return summarise_dashboard(
            today or date.today(),
            self.store.services.list_all().unwrap(),
            self.store.expenses.list_all().unwrap(),
            self.store.closed_months.list_all().unwrap(),
            fixed_salary=self.settlements.fixed_salary,
        )


def open_workspace(
    store: Optional[Store] = None,
    *,
    backend: Optional[str] = None,
    data_directory: Optional[Path] = None,
    fixed_salary: Optional[float] = None,
    per_hectare_rate: Optional[float] = None,
) -> Workspace:
    """Create a ``Workspace``; constants default to the configured settings."""

    settings = get_settings()
    store = store or create_store(backend, data_directory=data_directory)
    salary = settings.fixed_salary if fixed_salary is None else fixed_salary
    rate = settings.per_hectare_deduction_rate if per_hectare_rate is None else per_hectare_rate

    settlements = SettlementService(store, fixed_salary=salary, per_hectare_rate=rate)
    clients = ClientDirectory(store.clients)
    LOGGER.debug("Workspace opened with salary=%.2f rate=%.2f", salary, rate)
    return Workspace(
        store=store,
        settlements=settlements,
        ledger=ContributionLedger(store.contributions),
        clients=clients,
        services=ServiceLog(store.services, clients, partner_unit_price=rate),
        expenses=ExpenseBook(store.expenses, settlements),
    )
