"""Mini README: FastAPI HTTP surface for the DroneFlow settlement engine.

Structure:
    * create_application - application factory wiring JSON routes to a workspace.
    * _http_error - maps engine errors to HTTP status codes.

Routes cover month computation, closing and reopening settlements, the
contribution ledger and the records that feed them (clients, areas,
services, expenses). Form fields are used for writes, mirroring the simple
HTML forms the operator console posts.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import FastAPI, Form, HTTPException
from fastapi.responses import JSONResponse

from ..configuration import get_settings
from ..errors import (
    DroneflowError,
    PartialSettlementError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from ..logging_utils import configure_root_logger, get_logger
from ..workspace import Workspace, open_workspace

LOGGER = get_logger(__name__)


def _http_error(error: DroneflowError) -> HTTPException:
    """Translate an engine error into an ``HTTPException``."""

    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, PartialSettlementError):
        month_year = error.closed_month.month_year if error.closed_month else None
        return HTTPException(
            status_code=500,
            detail={"message": str(error), "partial": True, "month_year": month_year},
        )
    if isinstance(error, StoreError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def create_application(workspace: Optional[Workspace] = None) -> FastAPI:
    """Create the FastAPI application bound to ``workspace`` (or a configured one)."""

    configure_root_logger(get_settings().log_level.upper())
    app = FastAPI(title="DroneFlow Settlement Centre", version="0.1.0")
    workspace = workspace or open_workspace()

    @app.get("/dashboard")
    async def dashboard() -> JSONResponse:
        """Headline figures for the current month and year."""

        try:
            metrics = workspace.dashboard()
        except DroneflowError as error:
            raise _http_error(error) from error
        LOGGER.debug("Dashboard metrics -> %s", metrics)
        return JSONResponse(metrics)

    @app.get("/months/{year}/{month}")
    async def compute_month(year: int, month: int) -> JSONResponse:
        """Live aggregate and distribution, plus the stored snapshot when closed."""

        try:
            computation = workspace.settlements.compute_month(month, year)
        except DroneflowError as error:
            raise _http_error(error) from error
        payload = computation.as_dict()
        if computation.closed_month is not None:
            payload["closed_month"] = computation.closed_month.as_dict()
        return JSONResponse(payload)

    @app.post("/months/{year}/{month}/close")
    async def close_month(year: int, month: int) -> JSONResponse:
        try:
            closed = workspace.settlements.close_month(month, year)
        except DroneflowError as error:
            raise _http_error(error) from error
        LOGGER.info("Month %s closed via API", closed.month_year)
        return JSONResponse(closed.as_dict(), status_code=201)

    @app.post("/months/reopen")
    async def reopen_month(month_year: str = Form(...)) -> JSONResponse:
        try:
            reopened = workspace.settlements.reopen_month(month_year)
        except DroneflowError as error:
            raise _http_error(error) from error
        LOGGER.info("Month %s reopened via API", reopened.month_year)
        return JSONResponse({"month_year": reopened.month_year, "reopened": True})

    @app.get("/closed-months")
    async def list_closed_months() -> JSONResponse:
        try:
            closed_months = workspace.settlements.list_closed_months()
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"closed_months": [closed.as_dict() for closed in closed_months]})

    @app.get("/balances")
    async def balances(month: Optional[int] = None, year: Optional[int] = None) -> JSONResponse:
        """Each beneficiary's running balance on top of the chosen month."""

        today = date.today()
        month = month or today.month
        year = year or today.year
        try:
            exported = workspace.balances(month, year)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"month": month, "year": year, "balances": exported})

    @app.get("/contributions")
    async def list_contributions(beneficiary: Optional[str] = None) -> JSONResponse:
        try:
            contributions = workspace.ledger.list_contributions(beneficiary)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"contributions": [entry.as_dict() for entry in contributions]})

    @app.post("/contributions")
    async def add_contribution(
        beneficiary: str = Form(...),
        amount: float = Form(...),
        contributed_on: Optional[str] = Form(None),
        notes: str = Form(""),
    ) -> JSONResponse:
        try:
            contribution = workspace.ledger.add_contribution(
                beneficiary, amount, contributed_on, notes
            )
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(contribution.as_dict(), status_code=201)

    @app.delete("/contributions/{contribution_id}")
    async def remove_contribution(contribution_id: str) -> JSONResponse:
        try:
            removed = workspace.ledger.remove_contribution(contribution_id)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    @app.get("/clients")
    async def list_clients(search: Optional[str] = None) -> JSONResponse:
        try:
            clients = workspace.clients.list_clients(search)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"clients": [client.as_dict() for client in clients]})

    @app.post("/clients")
    async def add_client(
        name: str = Form(...),
        contact: str = Form(...),
        is_partner: bool = Form(False),
        partner_name: Optional[str] = Form(None),
    ) -> JSONResponse:
        try:
            client = workspace.clients.add_client(
                name, contact, is_partner=is_partner, partner_name=partner_name
            )
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(client.as_dict(), status_code=201)

    @app.delete("/clients/{client_id}")
    async def delete_client(client_id: str) -> JSONResponse:
        try:
            removed = workspace.clients.delete_client(client_id)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    @app.post("/clients/{client_id}/areas")
    async def add_area(
        client_id: str,
        name: str = Form(...),
        hectares: float = Form(...),
    ) -> JSONResponse:
        try:
            area = workspace.clients.add_area(client_id, name, hectares)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(area.as_dict(), status_code=201)

    @app.put("/clients/{client_id}/areas/{area_id}")
    async def update_area(
        client_id: str,
        area_id: str,
        name: Optional[str] = Form(None),
        hectares: Optional[float] = Form(None),
    ) -> JSONResponse:
        try:
            area = workspace.clients.update_area(client_id, area_id, name=name, hectares=hectares)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(area.as_dict())

    @app.delete("/clients/{client_id}/areas/{area_id}")
    async def remove_area(client_id: str, area_id: str) -> JSONResponse:
        try:
            removed = workspace.clients.remove_area(client_id, area_id)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    @app.get("/services")
    async def list_services(month: Optional[int] = None, year: Optional[int] = None) -> JSONResponse:
        try:
            services = workspace.services.list_services(month, year)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"services": [service.as_dict() for service in services]})

    @app.post("/services")
    async def record_service(
        service_date: str = Form(...),
        client_id: str = Form(...),
        area_id: str = Form(...),
        service_type: str = Form("spraying"),
        hectares: Optional[float] = Form(None),
        unit_price: Optional[float] = Form(None),
    ) -> JSONResponse:
        try:
            service = workspace.services.record_service(
                service_date,
                client_id,
                area_id,
                service_type,
                hectares=hectares,
                unit_price=unit_price,
            )
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(service.as_dict(), status_code=201)

    @app.delete("/services/{service_id}")
    async def delete_service(service_id: str) -> JSONResponse:
        try:
            removed = workspace.services.delete_service(service_id)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    @app.get("/expenses")
    async def list_expenses(
        month: Optional[int] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
    ) -> JSONResponse:
        try:
            expenses = workspace.expenses.list_expenses(month, year, search=search)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse({"expenses": [expense.as_dict() for expense in expenses]})

    @app.post("/expenses")
    async def add_expense(
        description: str = Form(...),
        amount: float = Form(...),
        expense_date: str = Form(...),
        category: str = Form("Miscellaneous"),
        paid_by: str = Form("Company"),
    ) -> JSONResponse:
        try:
            expense = workspace.expenses.add_expense(
                description, amount, expense_date, category=category, paid_by=paid_by
            )
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(expense.as_dict(), status_code=201)

    @app.put("/expenses/{expense_id}")
    async def update_expense(
        expense_id: str,
        description: Optional[str] = Form(None),
        amount: Optional[float] = Form(None),
        expense_date: Optional[str] = Form(None),
        category: Optional[str] = Form(None),
        paid_by: Optional[str] = Form(None),
    ) -> JSONResponse:
        """Edit an unlocked expense; only submitted fields change."""

        submitted = {
            "description": description,
            "amount": amount,
            "date": expense_date,
            "category": category,
            "paid_by": paid_by,
        }
        changes = {key: value for key, value in submitted.items() if value is not None}
        try:
            expense = workspace.expenses.update_expense(expense_id, **changes)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(expense.as_dict())

    @app.delete("/expenses/{expense_id}")
    async def delete_expense(expense_id: str) -> JSONResponse:
        try:
            removed = workspace.expenses.delete_expense(expense_id)
        except DroneflowError as error:
            raise _http_error(error) from error
        return JSONResponse(removed.as_dict())

    return app
