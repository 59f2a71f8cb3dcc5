"""JFR panel exporter."""

from .app import IPipeline, Pipeline, PipelineState
from .config import Settings
from .environment import (
    ContainerProvisioner,
    IEnvironmentProvisioner,
    Service,
    StaticProvisioner,
    create_provisioner,
)
from .errors import (
    ConversionError,
    DashboardNotFoundError,
    DegenerateWindowError,
    InputError,
    PanelExportError,
    PipelineError,
    ProvisioningError,
    RenderError,
    SearchError,
    TraceDecodeError,
    TransportError,
    UploadError,
)
from .grafana import DashboardResolver, IDashboardResolver, IPanelExporter, PanelExporter
from .ingest import IRecordingUploader, RecordingUploader
from .layout import load_panel_layout
from .models import (
    Attribute,
    Dashboard,
    EventGroup,
    EventRecord,
    EventType,
    ExportReport,
    Panel,
    PanelExportResult,
    RenderRequest,
    TimeField,
    TimeWindow,
    ValueKind,
)
from .trace import ITraceLoader, JfrJsonLoader, to_epoch_millis
from .window import ITraceWindowComputer, TraceWindowComputer

__all__ = [
    # Pipeline
    "IPipeline",
    "Pipeline",
    "PipelineState",
    "Settings",
    # Models
    "ValueKind",
    "TimeField",
    "Attribute",
    "EventType",
    "EventRecord",
    "EventGroup",
    "TimeWindow",
    "Dashboard",
    "Panel",
    "RenderRequest",
    "PanelExportResult",
    "ExportReport",
    # Components
    "ITraceLoader",
    "JfrJsonLoader",
    "to_epoch_millis",
    "ITraceWindowComputer",
    "TraceWindowComputer",
    "IDashboardResolver",
    "DashboardResolver",
    "IRecordingUploader",
    "RecordingUploader",
    "IPanelExporter",
    "PanelExporter",
    "load_panel_layout",
    # Environment
    "IEnvironmentProvisioner",
    "ContainerProvisioner",
    "StaticProvisioner",
    "Service",
    "create_provisioner",
    # Errors
    "PipelineError",
    "InputError",
    "TraceDecodeError",
    "ConversionError",
    "DegenerateWindowError",
    "DashboardNotFoundError",
    "TransportError",
    "UploadError",
    "SearchError",
    "RenderError",
    "PanelExportError",
    "ProvisioningError",
]
