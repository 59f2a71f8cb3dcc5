"""Core data models for the panel exporter."""

from .trace import Attribute, EventGroup, EventRecord, EventType, TimeField, ValueKind
from .window import TimeWindow
from .export import Dashboard, ExportReport, Panel, PanelExportResult, RenderRequest

__all__ = [
    # Trace
    "ValueKind",
    "TimeField",
    "Attribute",
    "EventType",
    "EventRecord",
    "EventGroup",
    # Window
    "TimeWindow",
    # Export
    "Dashboard",
    "Panel",
    "RenderRequest",
    "PanelExportResult",
    "ExportReport",
]
