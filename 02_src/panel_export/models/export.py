"""Dashboard, panel and export result models."""

from dataclasses import dataclass, field
from pathlib import Path

from .window import TimeWindow

_PATH_SEPARATORS = ("/", "\\")


@dataclass(frozen=True)
class Dashboard:
    """A dashboard known to the visualization service."""

    uid: str
    title: str


@dataclass(frozen=True)
class Panel:
    """One chart of the dashboard layout."""

    id: int
    title: str

    @property
    def filename(self) -> str:
        """Export file name: the title, made safe to use as a single path component."""
        name = self.title
        for separator in _PATH_SEPARATORS:
            name = name.replace(separator, "_")
        return f"{name}.png"


@dataclass(frozen=True)
class RenderRequest:
    """Everything needed to render one panel over the trace window."""

    dashboard_uid: str
    dashboard_slug: str
    panel: Panel
    window: TimeWindow
    width: int
    height: int
    timezone: str
    org_id: int = 1

    @property
    def path(self) -> str:
        return f"/render/d-solo/{self.dashboard_uid}/{self.dashboard_slug}"

    def params(self) -> dict[str, str | int]:
        """Query string parameters, in the order the render endpoint documents them."""
        return {
            "orgId": self.org_id,
            "from": self.window.start_ms,
            "to": self.window.end_ms,
            "panelId": self.panel.id,
            "width": self.width,
            "height": self.height,
            "tz": self.timezone,
        }


@dataclass
class PanelExportResult:
    """Outcome of exporting a single panel."""

    panel: Panel
    path: Path | None = None
    status_code: int | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None


@dataclass
class ExportReport:
    """Per-panel outcomes of one export batch, in layout order."""

    results: list[PanelExportResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[PanelExportResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[PanelExportResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed
