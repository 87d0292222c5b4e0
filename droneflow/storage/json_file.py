"""Mini README: JSON file repository backend.

Each entity is stored as ``<directory>/<entity>.json`` holding a list of
``as_dict`` payloads. Files are rewritten through a temporary sibling and an
atomic rename so an interrupted write never leaves a truncated file behind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from ..logging_utils import get_logger
from .base import RecordT, Repository
from .registry import REGISTRY

LOGGER = get_logger(__name__)


class JsonFileRepository(Repository[RecordT]):
    """Repository persisting one JSON document per entity."""

    backend_name = "json"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        directory = Path(self.directory or "data").expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        self.path = directory / f"{self.entity}.json"

    def _read(self) -> Dict[str, RecordT]:
        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        records = [self.record_type.from_dict(item) for item in payload]  # type: ignore[attr-defined]
        return {record.record_id: record for record in records}  # type: ignore[attr-defined]

    def _write(self, records: Dict[str, RecordT]) -> None:
        payload = [record.as_dict() for record in records.values()]  # type: ignore[attr-defined]
        temporary = self.path.with_suffix(".json.tmp")
        temporary.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        temporary.replace(self.path)
        LOGGER.debug("Wrote %s %s records to %s", len(payload), self.entity, self.path)


REGISTRY.register(JsonFileRepository)
