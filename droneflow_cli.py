"""Mini README: Entry point CLI for the DroneFlow settlement centre.

This script exposes a Typer CLI to start the HTTP API and to run the
settlement operations directly against the configured store: compute a
month, close or reopen it, record contributions and print balances. Output
is JSON so it can be piped into other tools. Engine errors are echoed to
stderr and exit with status 1.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, NoReturn, Optional

import typer
import uvicorn

from droneflow.configuration import get_settings
from droneflow.errors import DroneflowError, PartialSettlementError
from droneflow.logging_utils import configure_root_logger
from droneflow.workspace import Workspace, open_workspace

cli = typer.Typer(help="Run and manage DroneFlow monthly settlements.")


def _workspace() -> Workspace:
    configure_root_logger(get_settings().log_level.upper())
    return open_workspace()


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(error: DroneflowError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    if isinstance(error, PartialSettlementError):
        typer.echo(
            "The settlement was stored; run 'resync-flags' to lock its expenses.", err=True
        )
    raise typer.Exit(code=1)


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level.upper())

    # 0.0.0.0 is a bind address, not something a browser can open.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting DroneFlow on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "droneflow.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("compute-month")
def compute_month(
    month: int = typer.Argument(..., help="Month number (1-12)."),
    year: int = typer.Argument(..., help="Four digit year."),
) -> None:
    """Print the live aggregate and distribution for a month."""

    try:
        computation = _workspace().settlements.compute_month(month, year)
    except DroneflowError as error:
        _fail(error)
    _emit(computation.as_dict())


@cli.command("close-month")
def close_month(
    month: int = typer.Argument(..., help="Month number (1-12)."),
    year: int = typer.Argument(..., help="Four digit year."),
) -> None:
    """Settle a month: store its snapshot and lock its expenses."""

    try:
        closed = _workspace().settlements.close_month(month, year)
    except DroneflowError as error:
        _fail(error)
    typer.echo(f"Closed {closed.month_year} ({closed.label}).")
    _emit([summary.as_dict() for summary in closed.partner_summaries])


@cli.command("reopen-month")
def reopen_month(month_year: str = typer.Argument(..., help="Settlement key, e.g. 5/2024.")) -> None:
    """Remove a month's settlement and unlock its expenses."""

    try:
        reopened = _workspace().settlements.reopen_month(month_year)
    except DroneflowError as error:
        _fail(error)
    typer.echo(f"Reopened {reopened.month_year}.")


@cli.command("list-closed-months")
def list_closed_months() -> None:
    """List settled months, most recent first."""

    try:
        closed_months = _workspace().settlements.list_closed_months()
    except DroneflowError as error:
        _fail(error)
    _emit(
        [
            {
                "month_year": closed.month_year,
                "label": closed.label,
                "total_revenue": closed.total_revenue,
                "total_expenses": closed.total_expenses,
                "net_profit": closed.net_profit,
                "closed_at": closed.closed_at.isoformat(),
            }
            for closed in closed_months
        ]
    )


@cli.command("add-contribution")
def add_contribution(
    beneficiary: str = typer.Argument(..., help="Beneficiary short name."),
    amount: float = typer.Argument(..., help="Amount paid in."),
    on: Optional[str] = typer.Option(None, "--on", help="ISO date, defaults to today."),
    notes: str = typer.Option("", help="Free text notes."),
) -> None:
    """Record a contribution paying down a beneficiary's balance."""

    try:
        contribution = _workspace().ledger.add_contribution(beneficiary, amount, on, notes)
    except DroneflowError as error:
        _fail(error)
    _emit(contribution.as_dict())


@cli.command("remove-contribution")
def remove_contribution(contribution_id: str = typer.Argument(...)) -> None:
    """Delete a contribution by identifier."""

    try:
        removed = _workspace().ledger.remove_contribution(contribution_id)
    except DroneflowError as error:
        _fail(error)
    typer.echo(f"Removed contribution {removed.contribution_id}.")


@cli.command()
def balances(
    month: Optional[int] = typer.Option(None, help="Month number, defaults to the current month."),
    year: Optional[int] = typer.Option(None, help="Year, defaults to the current year."),
) -> None:
    """Print each beneficiary's running balance."""

    today = date.today()
    try:
        exported = _workspace().balances(month or today.month, year or today.year)
    except DroneflowError as error:
        _fail(error)
    _emit(exported)


@cli.command()
def dashboard() -> None:
    """Print headline figures for the current month and year."""

    try:
        metrics = _workspace().dashboard()
    except DroneflowError as error:
        _fail(error)
    _emit(metrics)


@cli.command("resync-flags")
def resync_flags() -> None:
    """Realign expense lock flags with the stored settlements."""

    try:
        changed = _workspace().settlements.resync_expense_flags()
    except DroneflowError as error:
        _fail(error)
    typer.echo(f"Updated {changed} expense(s).")


@cli.command("seed-demo")
def seed_demo() -> None:
    """Load the demo farms into an empty store."""

    try:
        seeded = _workspace().clients.seed_demo_clients()
    except DroneflowError as error:
        _fail(error)
    typer.echo(f"Seeded {len(seeded)} client(s).")


if __name__ == "__main__":
    cli()
