"""Error taxonomy for the export pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ExportReport


class PipelineError(Exception):
    """Base class for every failure that ends a run."""


class InputError(PipelineError):
    """Invalid command line input (missing or unreadable trace path)."""


class TraceDecodeError(PipelineError):
    """The recording could not be decoded into event records."""


class ConversionError(ValueError):
    """A single value could not be converted to epoch milliseconds.

    Recoverable: the window computer skips the record and moves on.
    """


class DegenerateWindowError(PipelineError):
    """No record contributed a valid timestamp, so there is nothing to render."""


class DashboardNotFoundError(PipelineError):
    """No dashboard with the requested title exists."""


class TransportError(PipelineError):
    """An HTTP call to one of the backing services failed."""


class UploadError(TransportError):
    """Uploading the recording to the ingestion service failed."""


class SearchError(TransportError):
    """The dashboard search call failed."""


class RenderError(TransportError):
    """Rendering or saving a single panel failed."""


class PanelExportError(PipelineError):
    """One or more panels failed to export."""

    def __init__(self, report: ExportReport):
        self.report = report
        titles = ", ".join(f'"{r.panel.title}"' for r in report.failed)
        super().__init__(
            f"{len(report.failed)} of {len(report.results)} panels failed to export: {titles}"
        )


class ProvisioningError(PipelineError):
    """The backing services could not be started or never became ready."""
