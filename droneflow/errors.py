"""Mini README: Exception hierarchy shared by the settlement engine.

Structure:
    * DroneflowError - base class for every error raised by the package.
    * ValidationError - rejected input, raised before any mutation.
    * MalformedInputError - a field could not be parsed (names the field).
    * RecordNotFoundError - an identifier does not resolve to a record.
    * StoreError - the persistence collaborator reported a failure.
    * PartialSettlementError - a month snapshot was stored but its expenses
      could not be locked.

``ValidationError`` subclasses ``ValueError`` and ``RecordNotFoundError``
subclasses ``KeyError`` so callers used to the builtin exceptions keep
working.
"""

from __future__ import annotations

from typing import Any, Optional


class DroneflowError(Exception):
    """Base class for DroneFlow errors."""


class ValidationError(DroneflowError, ValueError):
    """Input was rejected before anything was written."""


class MalformedInputError(ValidationError):
    """A value could not be interpreted; ``field`` names the culprit."""

    def __init__(self, field: str, value: Any, reason: str = "") -> None:
        self.field = field
        self.value = value
        message = f"Malformed value for '{field}': {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RecordNotFoundError(DroneflowError, KeyError):
    """An identifier did not match any stored record."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Record not found"


class StoreError(DroneflowError):
    """The persistence collaborator failed to read or write."""


class PartialSettlementError(DroneflowError):
    """The closed-month snapshot persisted but the expense lock step failed.

    The month is reported as closed while some of its expenses may remain
    editable; ``closed_month`` is the snapshot that was stored.
    """

    def __init__(self, message: str, closed_month: Optional[Any] = None) -> None:
        super().__init__(message)
        self.closed_month = closed_month
