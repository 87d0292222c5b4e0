"""Mini README: The bundle of repositories the engine works against.

Structure:
    * Store - one repository per entity.
    * create_store - build a ``Store`` for a registered backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..configuration import get_settings
from ..finance.models import ClosedMonth, Client, Contribution, Expense, ServiceRecord
from ..logging_utils import get_logger
from .base import Repository
from .registry import REGISTRY

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Store:
    """Repositories for every persisted entity."""

    clients: Repository[Client]
    services: Repository[ServiceRecord]
    expenses: Repository[Expense]
    contributions: Repository[Contribution]
    closed_months: Repository[ClosedMonth]


def create_store(backend: Optional[str] = None, *, data_directory: Optional[Path] = None) -> Store:
    """Create a ``Store`` using ``backend`` (defaults to the configured one)."""

    if backend is None:
        backend = get_settings().store_backend
    if data_directory is None and backend != "memory":
        data_directory = get_settings().data_directory
    LOGGER.info("Opening %s store (directory=%s)", backend, data_directory)
    return Store(
        clients=REGISTRY.create(backend, "clients", Client, directory=data_directory),
        services=REGISTRY.create(backend, "services", ServiceRecord, directory=data_directory),
        expenses=REGISTRY.create(backend, "expenses", Expense, directory=data_directory),
        contributions=REGISTRY.create(
            backend, "contributions", Contribution, directory=data_directory
        ),
        closed_months=REGISTRY.create(
            backend, "closed_months", ClosedMonth, directory=data_directory
        ),
    )
