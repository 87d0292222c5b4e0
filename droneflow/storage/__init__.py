"""Mini README: Persistence collaborators for the settlement engine.

Re-exports the repository abstraction, the backend registry and the
``Store`` bundle. Importing the package registers the built-in ``memory``
and ``json`` backends.
"""

from .base import Repository, StoreResult
from .registry import REGISTRY, StoreBackendRegistry
from . import json_file, memory  # noqa: F401  # ensure built-in backends register on import
from .json_file import JsonFileRepository
from .memory import InMemoryRepository
from .store import Store, create_store

__all__ = [
    "InMemoryRepository",
    "JsonFileRepository",
    "REGISTRY",
    "Repository",
    "Store",
    "StoreBackendRegistry",
    "StoreResult",
    "create_store",
]
