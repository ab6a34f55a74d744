"""
Dashboard module package exports.
"""

from .controller import DashboardController
from .model import DashboardSnapshot, alert_level, load_snapshot
from .view import DashboardView

__all__ = [
    "DashboardController",
    "DashboardSnapshot",
    "DashboardView",
    "alert_level",
    "load_snapshot",
]
