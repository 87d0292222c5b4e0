"""Mini README: Domain records handled by the settlement engine.

Structure:
    * ApplicationType - spraying versus dispersal services.
    * Area / Client - farms and their fields.
    * ServiceRecord - a billed service execution (revenue).
    * Expense - an operating cost, optionally fronted by a beneficiary.
    * Contribution - a beneficiary paying down a negative balance.
    * PartnerSummary - one beneficiary's share of a period.
    * ClosedMonth - the frozen snapshot written when a month is settled.

Every record exposes ``record_id`` (used by the store), ``as_dict`` for JSON
responses and persistence, and ``from_dict`` to rebuild it. Dates are coerced
on construction so a malformed value fails early with the offending field
named.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..errors import MalformedInputError
from .periods import coerce_date
from .rounding import generous_round


class ApplicationType(str, Enum):
    """Enumerate the supported service types."""

    SPRAYING = "spraying"
    DISPERSAL = "dispersal"

    @classmethod
    def from_str(cls, value: str) -> "ApplicationType":
        """Coerce arbitrary casing into a valid application type."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise MalformedInputError("type", value, "expected spraying or dispersal") from error


def _as_float(value: Any, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as error:
        raise MalformedInputError(field_name, value, "expected a number") from error


def _coerce_datetime(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as error:
            raise MalformedInputError(field_name, value, "expected an ISO timestamp") from error
    raise MalformedInputError(field_name, value, "expected an ISO timestamp")


@dataclass(slots=True)
class Area:
    """A field belonging to a client; ``hectares`` is its nominal size."""

    area_id: str
    name: str
    hectares: float

    def __post_init__(self) -> None:
        self.hectares = _as_float(self.hectares, "hectares")

    @property
    def record_id(self) -> str:
        return self.area_id

    def as_dict(self) -> Dict[str, Any]:
        return {"area_id": self.area_id, "name": self.name, "hectares": self.hectares}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Area":
        return cls(
            area_id=str(payload["area_id"]),
            name=str(payload["name"]),
            hectares=payload["hectares"],
        )


@dataclass(slots=True)
class Client:
    """A farm billed for services. ``partner_name`` links it to a field partner."""

    client_id: str
    name: str
    contact: str
    is_partner: bool = False
    partner_name: Optional[str] = None
    areas: List[Area] = field(default_factory=list)

    @property
    def record_id(self) -> str:
        return self.client_id

    def find_area(self, area_id: str) -> Optional[Area]:
        for area in self.areas:
            if area.area_id == area_id:
                return area
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "client_id": self.client_id,
            "name": self.name,
            "contact": self.contact,
            "is_partner": self.is_partner,
            "partner_name": self.partner_name,
            "areas": [area.as_dict() for area in self.areas],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Client":
        return cls(
            client_id=str(payload["client_id"]),
            name=str(payload["name"]),
            contact=str(payload.get("contact", "")),
            is_partner=bool(payload.get("is_partner", False)),
            partner_name=payload.get("partner_name"),
            areas=[Area.from_dict(area) for area in payload.get("areas", [])],
        )


@dataclass(slots=True)
class ServiceRecord:
    """A service execution. ``total_value`` is always derived from size and price."""

    service_id: str
    date: date
    client_id: str
    client_name: str
    area_id: str
    area_name: str
    hectares: float
    type: ApplicationType
    unit_price: float
    total_value: float = field(init=False)

    def __post_init__(self) -> None:
        self.date = coerce_date(self.date, "date")
        if not isinstance(self.type, ApplicationType):
            self.type = ApplicationType.from_str(str(self.type))
        self.hectares = generous_round(_as_float(self.hectares, "hectares"))
        self.unit_price = generous_round(_as_float(self.unit_price, "unit_price"))
        self.total_value = generous_round(self.hectares * self.unit_price)

    @property
    def record_id(self) -> str:
        return self.service_id

    def as_dict(self) -> Dict[str, Any]:
        return {
            "service_id": self.service_id,
            "date": self.date.isoformat(),
            "client_id": self.client_id,
            "client_name": self.client_name,
            "area_id": self.area_id,
            "area_name": self.area_name,
            "hectares": self.hectares,
            "type": self.type.value,
            "unit_price": self.unit_price,
            "total_value": self.total_value,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ServiceRecord":
        return cls(
            service_id=str(payload["service_id"]),
            date=payload["date"],
            client_id=str(payload["client_id"]),
            client_name=str(payload.get("client_name", "")),
            area_id=str(payload["area_id"]),
            area_name=str(payload.get("area_name", "")),
            hectares=payload["hectares"],
            type=payload["type"],
            unit_price=payload["unit_price"],
        )


@dataclass(slots=True)
class Expense:
    """An operating cost. ``closed`` mirrors whether its month is settled."""

    expense_id: str
    description: str
    amount: float
    category: str
    date: date
    paid_by: str
    closed: bool = False

    def __post_init__(self) -> None:
        self.date = coerce_date(self.date, "date")
        self.amount = _as_float(self.amount, "amount")

    @property
    def record_id(self) -> str:
        return self.expense_id

    def as_dict(self) -> Dict[str, Any]:
        return {
            "expense_id": self.expense_id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat(),
            "paid_by": self.paid_by,
            "closed": self.closed,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Expense":
        return cls(
            expense_id=str(payload["expense_id"]),
            description=str(payload["description"]),
            amount=payload["amount"],
            category=str(payload.get("category", "")),
            date=payload["date"],
            paid_by=str(payload.get("paid_by", "")),
            closed=bool(payload.get("closed", False)),
        )


@dataclass(slots=True)
class Contribution:
    """A repayment made by a beneficiary; never tied to a month."""

    contribution_id: str
    partner_name: str
    amount: float
    date: date
    notes: str = ""

    def __post_init__(self) -> None:
        self.date = coerce_date(self.date, "date")
        self.amount = _as_float(self.amount, "amount")

    @property
    def record_id(self) -> str:
        return self.contribution_id

    def as_dict(self) -> Dict[str, Any]:
        return {
            "contribution_id": self.contribution_id,
            "partner_name": self.partner_name,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Contribution":
        return cls(
            contribution_id=str(payload["contribution_id"]),
            partner_name=str(payload["partner_name"]),
            amount=payload["amount"],
            date=payload["date"],
            notes=str(payload.get("notes", "")),
        )


@dataclass(slots=True)
class PartnerSummary:
    """One beneficiary's result for a period.

    ``salary`` is kept apart from ``net_profit``; use ``grand_total`` for the
    amount actually due to the beneficiary.
    """

    name: str
    short_id: str
    gross_profit: float
    deductions: float
    reimbursements: float
    net_profit: float
    salary: Optional[float] = None
    hectares: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "short_id": self.short_id,
            "gross_profit": self.gross_profit,
            "deductions": self.deductions,
            "reimbursements": self.reimbursements,
            "net_profit": self.net_profit,
            "salary": self.salary,
            "hectares": self.hectares,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PartnerSummary":
        salary = payload.get("salary")
        return cls(
            name=str(payload["name"]),
            short_id=str(payload["short_id"]),
            gross_profit=float(payload["gross_profit"]),
            deductions=float(payload.get("deductions", 0.0)),
            reimbursements=float(payload.get("reimbursements", 0.0)),
            net_profit=float(payload["net_profit"]),
            salary=float(salary) if salary is not None else None,
            hectares=float(payload.get("hectares", 0.0)),
        )


@dataclass(slots=True)
class ClosedMonth:
    """Frozen settlement of one calendar month, keyed by ``month_year``."""

    closed_month_id: str
    month_year: str
    label: str
    total_revenue: float
    total_expenses: float
    net_profit: float
    hectares: float
    services: List[ServiceRecord]
    expenses: List[Expense]
    partner_summaries: List[PartnerSummary]
    closed_at: datetime

    def __post_init__(self) -> None:
        self.closed_at = _coerce_datetime(self.closed_at, "closed_at")

    @property
    def record_id(self) -> str:
        return self.closed_month_id

    def summary_for(self, short_id: str) -> Optional[PartnerSummary]:
        for summary in self.partner_summaries:
            if summary.short_id == short_id:
                return summary
        return None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "closed_month_id": self.closed_month_id,
            "month_year": self.month_year,
            "label": self.label,
            "total_revenue": self.total_revenue,
            "total_expenses": self.total_expenses,
            "net_profit": self.net_profit,
            "hectares": self.hectares,
            "services": [service.as_dict() for service in self.services],
            "expenses": [expense.as_dict() for expense in self.expenses],
            "partner_summaries": [summary.as_dict() for summary in self.partner_summaries],
            "closed_at": self.closed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ClosedMonth":
        return cls(
            closed_month_id=str(payload["closed_month_id"]),
            month_year=str(payload["month_year"]),
            label=str(payload.get("label", "")),
            total_revenue=float(payload["total_revenue"]),
            total_expenses=float(payload["total_expenses"]),
            net_profit=float(payload["net_profit"]),
            hectares=float(payload.get("hectares", 0.0)),
            services=[ServiceRecord.from_dict(item) for item in payload.get("services", [])],
            expenses=[Expense.from_dict(item) for item in payload.get("expenses", [])],
            partner_summaries=[
                PartnerSummary.from_dict(item) for item in payload.get("partner_summaries", [])
            ],
            closed_at=payload["closed_at"],
        )


def generate_id(prefix: str) -> str:
    """Return a short random identifier such as ``exp_3f9c2a1b0d``."""

    return f"{prefix}_{uuid4().hex[:10]}"
