"""Visualization service clients."""

from .render import IPanelExporter, PanelExporter
from .search import DashboardResolver, DashboardSummary, IDashboardResolver

__all__ = [
    "DashboardResolver",
    "DashboardSummary",
    "IDashboardResolver",
    "IPanelExporter",
    "PanelExporter",
]
