"""Mini README: Record management around the settlement engine.

Clients and their areas, service executions and expenses are created and
edited here, applying the same rounding and validation rules the settlement
maths relies on.
"""

from .clients import DEMO_CLIENTS, ClientDirectory
from .expenses import EXPENSE_CATEGORIES, ExpenseBook
from .services import ServiceLog

__all__ = [
    "ClientDirectory",
    "DEMO_CLIENTS",
    "EXPENSE_CATEGORIES",
    "ExpenseBook",
    "ServiceLog",
]
