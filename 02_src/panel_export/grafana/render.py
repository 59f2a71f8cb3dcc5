"""Parallel panel rendering and export."""

import asyncio
import os
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import httpx

from ..config import Settings
from ..errors import DashboardNotFoundError, DegenerateWindowError, RenderError
from ..logging_config import get_logger
from ..models import ExportReport, Panel, PanelExportResult, RenderRequest, TimeWindow

logger = get_logger(__name__)


class IPanelExporter(Protocol):
    """Render every panel of a dashboard over a time window into image files."""

    async def export(
        self,
        dashboard_uid: str,
        window: TimeWindow,
        panels: Sequence[Panel],
        output_dir: Path,
    ) -> ExportReport:
        """Render all panels concurrently and report per-panel outcomes."""
        ...


class PanelExporter:
    """Fans out one render request per panel and streams each image to disk."""

    def __init__(self, base_url: str, client: httpx.AsyncClient, settings: Settings):
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._settings = settings

    def build_request(self, dashboard_uid: str, window: TimeWindow, panel: Panel) -> RenderRequest:
        return RenderRequest(
            dashboard_uid=dashboard_uid,
            dashboard_slug=self._settings.dashboard_slug,
            panel=panel,
            window=window,
            width=self._settings.render_width,
            height=self._settings.render_height,
            timezone=self._settings.render_timezone,
            org_id=self._settings.org_id,
        )

    async def export(
        self,
        dashboard_uid: str,
        window: TimeWindow,
        panels: Sequence[Panel],
        output_dir: Path,
    ) -> ExportReport:
        """
        Render all panels concurrently and report per-panel outcomes.

        A failing panel does not cancel the others; its error is recorded in
        the report. Panels sharing a title overwrite each other's file.

        Raises:
            DashboardNotFoundError: dashboard_uid is empty.
            DegenerateWindowError: the window has no valid bounds.
        """
        if not dashboard_uid:
            raise DashboardNotFoundError("no dashboard uid to render panels against")
        if window.is_degenerate:
            raise DegenerateWindowError("refusing to render over a degenerate trace window")

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        semaphore = asyncio.Semaphore(max(1, self._settings.max_concurrency))
        requests = [self.build_request(dashboard_uid, window, panel) for panel in panels]
        results = await asyncio.gather(
            *[self._export_panel(request, output_dir, semaphore) for request in requests]
        )

        report = ExportReport(results=list(results))
        logger.info(
            "Exported %d of %d panels to %s",
            len(report.succeeded),
            len(report.results),
            output_dir,
        )
        return report

    async def _export_panel(
        self,
        request: RenderRequest,
        output_dir: Path,
        semaphore: asyncio.Semaphore,
    ) -> PanelExportResult:
        result = PanelExportResult(panel=request.panel)
        target = output_dir / request.panel.filename
        # Unique per task so that panels sharing a title never share a partial file
        partial = output_dir / f".{request.panel.id}-{uuid.uuid4().hex}.part"

        async with semaphore:
            try:
                result.status_code = await self._download(request, partial)
                await asyncio.to_thread(os.replace, partial, target)
                result.path = target
            except RenderError as e:
                result.error = e
            except (httpx.HTTPError, OSError) as e:
                error = RenderError(f'panel "{request.panel.title}" export failed: {e}')
                error.__cause__ = e
                result.error = error
            finally:
                await asyncio.to_thread(partial.unlink, missing_ok=True)

        if result.error is not None:
            logger.error("%s", result.error)
        return result

    async def _download(self, request: RenderRequest, destination: Path) -> int:
        async with self._client.stream(
            "GET",
            f"{self._base_url}{request.path}",
            params=request.params(),
            auth=self._settings.auth,
        ) as response:
            logger.info(
                'png "%s" download response status %d',
                request.panel.title,
                response.status_code,
            )
            if response.is_error:
                raise RenderError(
                    f'panel "{request.panel.title}" render failed with status {response.status_code}'
                )
            out = await asyncio.to_thread(destination.open, "wb")
            try:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(out.write, chunk)
            finally:
                await asyncio.to_thread(out.close)
            return response.status_code
