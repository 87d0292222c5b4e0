"""Mini README: In-process repository backend.

Records live in a dictionary owned by the repository. Reads and writes copy
the records so callers can never alias stored state; a month snapshot stays
frozen even when the live objects it was built from are edited afterwards.
"""

from __future__ import annotations

import copy
from typing import Dict

from .base import RecordT, Repository
from .registry import REGISTRY


class InMemoryRepository(Repository[RecordT]):
    """Repository keeping records in memory for tests and demos."""

    backend_name = "memory"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._records: Dict[str, RecordT] = {}

    def _read(self) -> Dict[str, RecordT]:
        return copy.deepcopy(self._records)

    def _write(self, records: Dict[str, RecordT]) -> None:
        self._records = copy.deepcopy(records)


REGISTRY.register(InMemoryRepository)
