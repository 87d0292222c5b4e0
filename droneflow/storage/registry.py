"""Mini README: Backend registry for repository implementations.

Structure:
    * StoreBackendRegistry - maps backend identifiers to ``Repository`` classes.

Built-in backends register themselves on import; third-party backends can
call ``REGISTRY.register`` with their own ``Repository`` subclass.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Type

from ..logging_utils import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .base import Repository

LOGGER = get_logger(__name__)


class StoreBackendRegistry:
    """Simple registry for mapping backend identifiers to repository classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type["Repository"]] = {}

    def register(self, backend: Type["Repository"]) -> None:
        """Register a repository class under its ``backend_name``."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering store backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        return sorted(self._backends.keys())

    def create(
        self,
        identifier: str,
        entity: str,
        record_type: type,
        *,
        directory: Optional[Path] = None,
    ) -> "Repository":
        """Instantiate the backend's repository for one entity."""

        backend_cls = self._backends.get(identifier.lower())
        if not backend_cls:
            raise KeyError(f"Unknown store backend '{identifier}'")
        return backend_cls(entity, record_type, directory=directory)


REGISTRY = StoreBackendRegistry()
