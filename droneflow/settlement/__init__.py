"""Mini README: Month settlement lifecycle.

The ``lifecycle`` module promotes a computed month into a frozen
``ClosedMonth`` record and can reopen it again, keeping expense lock flags in
step with the settlements that exist.
"""

from .lifecycle import MonthComputation, SettlementService

__all__ = ["MonthComputation", "SettlementService"]
