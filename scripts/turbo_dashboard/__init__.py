"""
turbo_dashboard – Python package for running the turbo parts inventory desk.

Public API
----------
TurboAPI              – REST client for the inventory backend
SessionManager        – local login marker with a 24 h sliding expiry
normalize_inventory   – turn backend lots into flat display rows
is_low_stock          – the low-stock rule shared by every view
DashboardController   – fetch/create/update/delete/sell orchestration
OrderComposer         – individual and bulk purchase orders
load_config           – settings from YAML and environment variables
"""

from .client import TurboAPI
from .config import Settings, load_config
from .controller import DashboardController, DashboardState
from .errors import ApiError, TurboDashboardError, ValidationError
from .forms import TurboForm
from .models import DisplayRow, InventoryLot, PendingOrder, SizeVariant, TurboStats
from .normalizer import filter_rows, is_low_stock, normalize_inventory
from .notifier import Notifier
from .orders import BulkOrderResult, OrderComposer
from .session import ActivityObserver, SessionManager

__all__ = [
    "ActivityObserver",
    "ApiError",
    "BulkOrderResult",
    "DashboardController",
    "DashboardState",
    "DisplayRow",
    "filter_rows",
    "InventoryLot",
    "is_low_stock",
    "load_config",
    "normalize_inventory",
    "Notifier",
    "OrderComposer",
    "PendingOrder",
    "Settings",
    "SessionManager",
    "SizeVariant",
    "TurboAPI",
    "TurboDashboardError",
    "TurboForm",
    "TurboStats",
    "ValidationError",
]
