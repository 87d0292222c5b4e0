"""Mini README: Client farms and their areas.

Structure:
    * DEMO_CLIENTS - sample farms used to seed an empty store.
    * ClientDirectory - create, edit and delete clients and their areas.

Areas are stored inside their client, so deleting a client removes its
areas with it. Area sizes are generously rounded like every other
operator-entered quantity. A client can be linked to at most one field
partner, and each field partner to at most one client.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..errors import RecordNotFoundError, ValidationError
from ..finance.beneficiaries import DEFAULT_ROSTER, Beneficiary, find_beneficiary
from ..finance.models import Area, Client, generate_id
from ..finance.rounding import generous_round
from ..logging_utils import get_logger
from ..storage.base import Repository

LOGGER = get_logger(__name__)

DEMO_CLIENTS: List[Dict[str, Any]] = [
    {
        "client_id": "c1",
        "name": "Boa Vista Farm (Kaká)",
        "contact": "(64) 99200-0000",
        "is_partner": True,
        "partner_name": "Kaká",
        "areas": [
            {"area_id": "a1", "name": "Plot 01 - Headquarters", "hectares": 45.5},
            {"area_id": "a2", "name": "Plot 02 - Woodland", "hectares": 32.8},
        ],
    },
    {
        "client_id": "c2",
        "name": "Progresso Farm (Patrick)",
        "contact": "(64) 99300-0000",
        "is_partner": True,
        "partner_name": "Patrick",
        "areas": [{"area_id": "a3", "name": "Grotão 01", "hectares": 110.2}],
    },
    {
        "client_id": "c3",
        "name": "Silva Independent Grower",
        "contact": "(62) 99999-9999",
        "is_partner": False,
        "areas": [{"area_id": "a4", "name": "South Field", "hectares": 25.0}],
    },
]


def _positive_hectares(value: Any) -> float:
    try:
        hectares = generous_round(float(value))
    except (TypeError, ValueError) as error:
        raise ValidationError(f"Hectares must be a number, got {value!r}.") from error
    if not hectares > 0:
        raise ValidationError("Hectares must be greater than zero.")
    return hectares


class ClientDirectory:
    """Manage clients and their areas through a repository."""

    def __init__(
        self,
        repository: Repository[Client],
        *,
        beneficiaries: Sequence[Beneficiary] = DEFAULT_ROSTER,
    ) -> None:
        self._repository = repository
        self._beneficiaries = beneficiaries

    def seed_demo_clients(self) -> List[Client]:
        """Populate an empty store with the demo farms; no-op otherwise."""

        if self._repository.list_all().unwrap():
            return []
        clients = [Client.from_dict(payload) for payload in DEMO_CLIENTS]
        self._repository.upsert(clients).unwrap()
        LOGGER.info("Seeded %s demo clients", len(clients))
        return clients

    def list_clients(self, search: Optional[str] = None) -> List[Client]:
        """Return clients sorted by name, optionally filtered by a name fragment."""

        clients = self._repository.list_all().unwrap()
        if search and search.strip():
            term = search.strip().lower()
            clients = [client for client in clients if term in client.name.lower()]
        return sorted(clients, key=lambda client: client.name.lower())

    def get_client(self, client_id: str) -> Client:
        for client in self._repository.list_all().unwrap():
            if client.client_id == client_id:
                return client
        raise RecordNotFoundError(f"Client {client_id} not found")

    def find_partner_client(self, beneficiary: str) -> Optional[Client]:
        """Return the client linked to a field partner, if any."""

        short_id = find_beneficiary(beneficiary, self._beneficiaries).short_id
        for client in self._repository.list_all().unwrap():
            if client.partner_name == short_id:
                return client
        return None

    def _validate_partner_link(self, partner_name: Optional[str], client_id: str) -> Optional[str]:
        if not partner_name:
            return None
        beneficiary = find_beneficiary(partner_name, self._beneficiaries)
        if not beneficiary.is_field_partner:
            raise ValidationError(f"{beneficiary.short_id} is not a field partner.")
        existing = self.find_partner_client(beneficiary.short_id)
        if existing is not None and existing.client_id != client_id:
            raise ValidationError(
                f"{beneficiary.short_id} is already linked to client {existing.name}."
            )
        return beneficiary.short_id

    def add_client(
        self,
        name: str,
        contact: str,
        *,
        is_partner: bool = False,
        partner_name: Optional[str] = None,
    ) -> Client:
        if not name or not name.strip():
            raise ValidationError("Client name is required.")
        if not contact or not contact.strip():
            raise ValidationError("Client contact is required.")
        client_id = generate_id("cli")
        linked = self._validate_partner_link(partner_name, client_id)
        client = Client(
            client_id=client_id,
            name=name.strip(),
            contact=contact.strip(),
            is_partner=bool(is_partner or linked),
            partner_name=linked,
        )
        self._repository.insert(client).unwrap()
        LOGGER.info("Created client %s (%s)", client.client_id, client.name)
        return client

    def update_client(self, client_id: str, **changes: Any) -> Client:
        """Edit name, contact or partner link. Past services keep their old names."""

        client = self.get_client(client_id)
        unsupported = set(changes) - {"name", "contact", "is_partner", "partner_name"}
        if unsupported:
            raise ValidationError(f"Cannot update client fields: {sorted(unsupported)}")
        if "name" in changes:
            if not changes["name"] or not str(changes["name"]).strip():
                raise ValidationError("Client name is required.")
            client.name = str(changes["name"]).strip()
        if "contact" in changes:
            client.contact = str(changes["contact"] or "").strip()
        if "partner_name" in changes:
            client.partner_name = self._validate_partner_link(changes["partner_name"], client_id)
        if "is_partner" in changes:
            client.is_partner = bool(changes["is_partner"])
        client.is_partner = client.is_partner or client.partner_name is not None
        self._repository.upsert([client]).unwrap()
        return client

    def delete_client(self, client_id: str) -> Client:
        """Remove a client together with its areas."""

        removed = self._repository.delete_by_id(client_id).unwrap()
        if not removed:
            raise RecordNotFoundError(f"Client {client_id} not found")
        LOGGER.info("Deleted client %s with %s areas", client_id, len(removed[0].areas))
        return removed[0]

    def add_area(self, client_id: str, name: str, hectares: float) -> Area:
        if not name or not name.strip():
            raise ValidationError("Area name is required.")
        client = self.get_client(client_id)
        area = Area(area_id=generate_id("area"), name=name.strip(), hectares=_positive_hectares(hectares))
        client.areas.append(area)
        self._repository.upsert([client]).unwrap()
        LOGGER.debug("Added area %s (%.2f ha) to client %s", area.area_id, area.hectares, client_id)
        return area

    def update_area(
        self,
        client_id: str,
        area_id: str,
        *,
        name: Optional[str] = None,
        hectares: Optional[float] = None,
    ) -> Area:
        client = self.get_client(client_id)
        area = client.find_area(area_id)
        if area is None:
            raise RecordNotFoundError(f"Area {area_id} not found on client {client_id}")
        if name is not None:
            if not name.strip():
                raise ValidationError("Area name is required.")
            area.name = name.strip()
        if hectares is not None:
            area.hectares = _positive_hectares(hectares)
        self._repository.upsert([client]).unwrap()
        return area

    def remove_area(self, client_id: str, area_id: str) -> Area:
        client = self.get_client(client_id)
        area = client.find_area(area_id)
        if area is None:
            raise RecordNotFoundError(f"Area {area_id} not found on client {client_id}")
        client.areas = [existing for existing in client.areas if existing.area_id != area_id]
        self._repository.upsert([client]).unwrap()
        return area
