"""Pipeline coordination: environment, trace window, upload, lookup and export."""

import asyncio
from collections.abc import Callable, Sequence
from enum import Enum
from pathlib import Path
from typing import Protocol

import httpx

from .config import DEFAULT_REPORTS_DIR, PathLike, Settings
from .environment import IEnvironmentProvisioner, Service, create_provisioner
from .errors import (
    DashboardNotFoundError,
    DegenerateWindowError,
    InputError,
    PanelExportError,
)
from .grafana import DashboardResolver, PanelExporter
from .ingest import RecordingUploader
from .layout import load_panel_layout
from .logging_config import get_logger
from .models import ExportReport, Panel, TimeWindow
from .trace import ITraceLoader, JfrJsonLoader
from .window import ITraceWindowComputer, TraceWindowComputer

logger = get_logger(__name__)


ClientFactory = Callable[[], httpx.AsyncClient]


class PipelineState(str, Enum):
    """Stages of a run. FAILED is reachable from every other state."""

    IDLE = "idle"
    ENVIRONMENT_UP = "environment_up"
    WINDOW_COMPUTED = "window_computed"
    UPLOADED = "uploaded"
    DASHBOARD_RESOLVED = "dashboard_resolved"
    EXPORTED = "exported"
    DONE = "done"
    FAILED = "failed"


class IPipeline(Protocol):
    """Turn one recording into one image per dashboard panel."""

    async def run(self, trace_path: PathLike | None, output_dir: PathLike = DEFAULT_REPORTS_DIR) -> int:
        """Run every stage; return 0 on success and 1 on failure."""
        ...


class Pipeline:
    """Sequences the stages of a run and owns environment teardown."""

    def __init__(
        self,
        settings: Settings | None = None,
        provisioner: IEnvironmentProvisioner | None = None,
        loader: ITraceLoader | None = None,
        computer: ITraceWindowComputer | None = None,
        client_factory: ClientFactory | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._provisioner = provisioner or create_provisioner(self._settings)
        self._loader = loader or JfrJsonLoader(self._settings.jfr_binary)
        self._computer = computer or TraceWindowComputer()
        self._client_factory = client_factory or self._default_client

        self._state = PipelineState.IDLE
        self._history: list[PipelineState] = [PipelineState.IDLE]
        self._window: TimeWindow | None = None
        self._dashboard_uid: str | None = None
        self._report: ExportReport | None = None
        self._trace_name: str | None = None

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(
                self._settings.render_timeout,
                connect=self._settings.connect_timeout,
            )
        )

    def _transition(self, state: PipelineState) -> None:
        logger.info(
            "Pipeline %s -> %s",
            self._state.value,
            state.value,
            extra={"context": {"trace": self._trace_name, "state": state.value}},
        )
        self._state = state
        self._history.append(state)

    async def run(self, trace_path: PathLike | None, output_dir: PathLike = DEFAULT_REPORTS_DIR) -> int:
        """
        Run every stage; return 0 on success and 1 on failure.

        Once the environment start has been attempted it is torn down exactly
        once, whatever state the run ends in.
        """
        self._trace_name = Path(trace_path).name if trace_path else None
        try:
            recording, panels = self._validate_input(trace_path)
        except InputError as e:
            logger.error("%s", e)
            self._transition(PipelineState.FAILED)
            return 1

        exit_code = 0
        try:
            await self._provisioner.start()
            self._transition(PipelineState.ENVIRONMENT_UP)
            await self._execute(recording, panels, Path(output_dir))
            self._transition(PipelineState.DONE)
        except Exception as e:
            logger.error("Pipeline failed in state %s: %s", self._state.value, e, exc_info=True)
            self._transition(PipelineState.FAILED)
            exit_code = 1
        finally:
            try:
                await self._provisioner.stop()
            except Exception as e:
                logger.error("Environment teardown failed: %s", e, exc_info=True)
                if exit_code == 0:
                    self._transition(PipelineState.FAILED)
                exit_code = 1

        return exit_code

    def _validate_input(self, trace_path: PathLike | None) -> tuple[Path, list[Panel]]:
        if not trace_path:
            raise InputError("trace recording path is required")
        recording = Path(trace_path)
        if not recording.is_file():
            raise InputError(f"trace recording {recording} does not exist or is not a file")
        logger.info("Trace recording %s", recording)

        panels = load_panel_layout(self._settings.panel_layout_path)
        return recording, panels

    def _compute_window(self, recording: Path) -> TimeWindow:
        groups = self._loader.load(recording)
        return self._computer.compute(groups)

    async def _execute(self, recording: Path, panels: Sequence[Panel], output_dir: Path) -> None:
        # Decoding and scanning are blocking; the window is final once the thread returns
        window = await asyncio.to_thread(self._compute_window, recording)
        if window.is_degenerate:
            raise DegenerateWindowError(f"no valid start/end timestamps found in {recording.name}")
        self._window = window
        self._transition(PipelineState.WINDOW_COMPUTED)

        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Reports path %s", output_dir.resolve())

        ingest_url = self._provisioner.endpoint(Service.INGEST)
        grafana_url = self._provisioner.endpoint(Service.GRAFANA)

        async with self._client_factory() as client:
            uploader = RecordingUploader(ingest_url, client)
            resolver = DashboardResolver(grafana_url, client, self._settings.auth)
            exporter = PanelExporter(grafana_url, client, self._settings)

            results = await asyncio.gather(
                self._upload(uploader, recording),
                self._resolve(resolver),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            dashboard_uid = results[1]

            report = await exporter.export(dashboard_uid, window, panels, output_dir)

        self._report = report
        if not report.ok:
            if self._settings.strict_export:
                raise PanelExportError(report)
            for failed in report.failed:
                logger.warning('Panel "%s" was not exported: %s', failed.panel.title, failed.error)
        self._transition(PipelineState.EXPORTED)

    async def _upload(self, uploader: RecordingUploader, recording: Path) -> None:
        await uploader.upload(recording)
        self._transition(PipelineState.UPLOADED)

    async def _resolve(self, resolver: DashboardResolver) -> str:
        title = self._settings.dashboard_title
        uid = await resolver.resolve(title)
        if uid is None:
            raise DashboardNotFoundError(f'no dashboard titled "{title}"')
        self._dashboard_uid = uid
        self._transition(PipelineState.DASHBOARD_RESOLVED)
        return uid

    @property
    def state(self) -> PipelineState:
        """Current state."""
        return self._state

    @property
    def history(self) -> list[PipelineState]:
        """Every state the run went through, in order."""
        return list(self._history)

    @property
    def window(self) -> TimeWindow | None:
        """Trace window, once computed."""
        return self._window

    @property
    def dashboard_uid(self) -> str | None:
        return self._dashboard_uid

    @property
    def report(self) -> ExportReport | None:
        """Per-panel export outcomes of the last run."""
        return self._report
