"""Mini README: Abstract persistence interface used by the engine.

Structure:
    * StoreResult - success with (possibly updated) records, or failure with a message.
    * Repository - abstract per-entity store implemented by backends.

Backends only implement ``_read`` and ``_write``; the public operations
(``list_all``, ``insert``, ``upsert``, ``delete_by_id``, ``update_fields`` and
``update_where``) are shared. Operations never raise for I/O problems: they
return a failed ``StoreResult`` and callers decide whether to ``unwrap`` it
into a ``StoreError``.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from ..errors import StoreError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

RecordT = TypeVar("RecordT")


@dataclass
class StoreResult(Generic[RecordT]):
    """Outcome of a repository operation."""

    ok: bool
    records: List[RecordT] = field(default_factory=list)
    message: str = ""

    @classmethod
    def success(cls, records: Iterable[RecordT] = ()) -> "StoreResult[RecordT]":
        return cls(ok=True, records=list(records))

    @classmethod
    def failure(cls, message: str) -> "StoreResult[RecordT]":
        return cls(ok=False, message=message)

    def unwrap(self) -> List[RecordT]:
        """Return the records or raise ``StoreError`` carrying the failure message."""

        if not self.ok:
            raise StoreError(self.message)
        return self.records


class Repository(ABC, Generic[RecordT]):
    """Base interface for per-entity persistence backends."""

    backend_name: str = "generic"

    def __init__(
        self,
        entity: str,
        record_type: Type[RecordT],
        *,
        directory: Optional[Path] = None,
    ) -> None:
        self.entity = entity
        self.record_type = record_type
        self.directory = directory
        LOGGER.debug("Initialising %s repository for '%s'", self.backend_name, entity)

    @abstractmethod
    def _read(self) -> Dict[str, RecordT]:
        """Return every stored record keyed by ``record_id``."""

    @abstractmethod
    def _write(self, records: Dict[str, RecordT]) -> None:
        """Replace the stored records with ``records``."""

    def _run(self, operation: str, action: Callable[[], List[RecordT]]) -> StoreResult[RecordT]:
        try:
            return StoreResult.success(action())
        except (OSError, ValueError, TypeError, KeyError) as error:
            LOGGER.error("%s %s failed: %s", self.entity, operation, error)
            return StoreResult.failure(f"{self.entity} {operation} failed: {error}")

    def list_all(self) -> StoreResult[RecordT]:
        return self._run("list", lambda: list(self._read().values()))

    def insert(self, record: RecordT) -> StoreResult[RecordT]:
        def action() -> List[RecordT]:
            records = self._read()
            key = record.record_id  # type: ignore[attr-defined]
            if key in records:
                raise KeyError(f"record {key} already exists")
            records[key] = copy.deepcopy(record)
            self._write(records)
            return [copy.deepcopy(record)]

        return self._run("insert", action)

    def upsert(self, new_records: Iterable[RecordT]) -> StoreResult[RecordT]:
        def action() -> List[RecordT]:
            records = self._read()
            written = [copy.deepcopy(record) for record in new_records]
            for record in written:
                records[record.record_id] = record  # type: ignore[attr-defined]
            self._write(records)
            return copy.deepcopy(written)

        return self._run("upsert", action)

    def delete_by_id(self, record_id: str) -> StoreResult[RecordT]:
        """Delete one record; an empty result means nothing matched."""

        def action() -> List[RecordT]:
            records = self._read()
            removed = records.pop(record_id, None)
            if removed is None:
                return []
            self._write(records)
            return [removed]

        return self._run("delete", action)

    def update_fields(self, record_id: str, fields: Mapping[str, Any]) -> StoreResult[RecordT]:
        """Apply ``fields`` to one record; an empty result means nothing matched."""

        return self.update_where(lambda record: record.record_id == record_id, fields)  # type: ignore[attr-defined]

    def update_where(
        self, predicate: Callable[[RecordT], bool], fields: Mapping[str, Any]
    ) -> StoreResult[RecordT]:
        """Apply ``fields`` to every record matching ``predicate``."""

        def action() -> List[RecordT]:
            records = self._read()
            updated: List[RecordT] = []
            for key, record in records.items():
                if predicate(record):
                    records[key] = replace(record, **fields)  # type: ignore[type-var]
                    updated.append(records[key])
            if updated:
                self._write(records)
            return copy.deepcopy(updated)

        return self._run("update", action)
