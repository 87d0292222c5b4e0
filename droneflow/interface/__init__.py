"""Mini README: Interactive interfaces for DroneFlow.

Exports the FastAPI application factory serving the settlement API. The
Typer CLI lives in ``droneflow_cli.py`` at the repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
