"""Mini README: Recording service executions.

Structure:
    * ServiceLog - create, delete and list ``ServiceRecord`` entries.

A new service copies the client and area names at creation time, defaults
its size to the area's nominal hectares and, for a partner's own farm, its
unit price to the internal per-hectare rate.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..configuration import get_settings
from ..errors import RecordNotFoundError, ValidationError
from ..finance.models import ApplicationType, ServiceRecord, generate_id
from ..finance.periods import coerce_date, falls_within, month_bounds
from ..finance.rounding import generous_round
from ..logging_utils import get_logger
from ..storage.base import Repository
from .clients import ClientDirectory

LOGGER = get_logger(__name__)


def _positive(value: Any, field_name: str) -> float:
    try:
        rounded = generous_round(float(value))
    except (TypeError, ValueError) as error:
        raise ValidationError(f"{field_name} must be a number, got {value!r}.") from error
    if not rounded > 0:
        raise ValidationError(f"{field_name} must be greater than zero.")
    return rounded


class ServiceLog:
    """Manage service records through a repository."""

    def __init__(
        self,
        repository: Repository[ServiceRecord],
        clients: ClientDirectory,
        *,
        partner_unit_price: Optional[float] = None,
    ) -> None:
        self._repository = repository
        self._clients = clients
        self._partner_unit_price = partner_unit_price

    def record_service(
        self,
        service_date: object,
        client_id: str,
        area_id: str,
        service_type: object = ApplicationType.SPRAYING,
        *,
        hectares: Optional[float] = None,
        unit_price: Optional[float] = None,
    ) -> ServiceRecord:
        """Create a service; omitted size and price are filled from the client."""

        client = self._clients.get_client(client_id)
        area = client.find_area(area_id)
        if area is None:
            raise ValidationError(f"Area {area_id} does not belong to client {client.name}.")
        if hectares is None:
            hectares = area.hectares
        if unit_price is None:
            if not client.is_partner:
                raise ValidationError("Unit price is required for non-partner clients.")
            unit_price = (
                get_settings().per_hectare_deduction_rate
                if self._partner_unit_price is None
                else self._partner_unit_price
            )
        if isinstance(service_type, ApplicationType):
            application = service_type
        else:
            application = ApplicationType.from_str(str(service_type))

        service = ServiceRecord(
            service_id=generate_id("svc"),
            date=coerce_date(service_date, "date"),
            client_id=client.client_id,
            client_name=client.name,
            area_id=area.area_id,
            area_name=area.name,
            hectares=_positive(hectares, "Hectares"),
            type=application,
            unit_price=_positive(unit_price, "Unit price"),
        )
        self._repository.insert(service).unwrap()
        LOGGER.info(
            "Recorded %s service %s: %.2f ha x %.2f = %.2f",
            service.type.value,
            service.service_id,
            service.hectares,
            service.unit_price,
            service.total_value,
        )
        return service

    def delete_service(self, service_id: str) -> ServiceRecord:
        removed = self._repository.delete_by_id(service_id).unwrap()
        if not removed:
            raise RecordNotFoundError(f"Service {service_id} not found")
        LOGGER.info("Deleted service %s", service_id)
        return removed[0]

    def list_services(self, month: Optional[int] = None, year: Optional[int] = None) -> List[ServiceRecord]:
        """Return services, newest first, optionally limited to one month."""

        services = self._repository.list_all().unwrap()
        if month is not None and year is not None:
            start, end = month_bounds(month, year)
            services = [service for service in services if falls_within(service.date, start, end)]
        return sorted(services, key=lambda service: (service.date, service.service_id), reverse=True)
