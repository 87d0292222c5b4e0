"""Mini README: Core package initializer for DroneFlow.

DroneFlow settles the monthly accounts of a drone crop-spraying business:
services billed to farms, operating costs, a four-way profit split and a
running contribution ledger per beneficiary. This module only re-exports the
logging helper and the workspace factory so entry points can start quickly.
"""

from .logging_utils import get_logger
from .workspace import Workspace, open_workspace

__all__ = ["Workspace", "get_logger", "open_workspace"]
