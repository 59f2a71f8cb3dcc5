"""In-process stand-ins for the ingestion and visualization services."""

import base64
from dataclasses import dataclass, field

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from panel_export.errors import ProvisioningError

STUB_URL = "http://stub"
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def basic_auth(username: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{username}:{password}".encode()).decode()


@dataclass
class StubState:
    """What the stub services answer with, and what they received."""

    dashboards: list[dict] = field(
        default_factory=lambda: [
            {"uid": "jfr-events", "title": "JFR Events", "type": "dash-db"},
        ]
    )
    username: str = "admin"
    password: str = "admin"
    load_status: int = 200
    search_status: int = 200
    failing_panels: set[int] = field(default_factory=set)
    uploads: list[bytes] = field(default_factory=list)
    upload_content_types: list[str] = field(default_factory=list)
    searches: list[dict] = field(default_factory=list)
    renders: list[dict] = field(default_factory=list)

    def authorized(self, request: Request) -> bool:
        return request.headers.get("authorization") == basic_auth(self.username, self.password)


def create_ingest_router(state: StubState) -> APIRouter:
    router = APIRouter()

    @router.get("/")
    async def root():
        return PlainTextResponse("jfr-datasource")

    @router.post("/load")
    async def load(request: Request):
        state.uploads.append(await request.body())
        state.upload_content_types.append(request.headers.get("content-type", ""))
        return PlainTextResponse("Uploaded: file", status_code=state.load_status)

    return router


def create_grafana_router(state: StubState) -> APIRouter:
    router = APIRouter()

    @router.get("/api/health")
    async def health():
        return {"database": "ok"}

    @router.get("/api/search")
    async def search(request: Request):
        if not state.authorized(request):
            return Response(status_code=401)
        state.searches.append(dict(request.query_params))
        return JSONResponse(state.dashboards, status_code=state.search_status)

    @router.get("/render/d-solo/{uid}/{slug}")
    async def render(uid: str, slug: str, request: Request):
        if not state.authorized(request):
            return Response(status_code=401)
        params = dict(request.query_params)
        state.renders.append({"uid": uid, "slug": slug, **params})
        panel_id = int(params["panelId"])
        if panel_id in state.failing_panels:
            return Response(status_code=500)
        return Response(
            content=PNG_HEADER + f"panel-{panel_id}".encode(),
            media_type="image/png",
        )

    return router


def create_stub_app(state: StubState) -> FastAPI:
    """Both services on one app; their paths do not overlap."""
    app = FastAPI(title="Stub services")
    app.include_router(create_ingest_router(state))
    app.include_router(create_grafana_router(state))
    return app


class StubProvisioner:
    """Environment whose services all live on the stub app."""

    def __init__(self, fail_start: bool = False, fail_stop: bool = False):
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.start_calls = 0
        self.stop_calls = 0

    async def start(self) -> None:
        self.start_calls += 1
        if self.fail_start:
            raise ProvisioningError("stub environment failed to start")

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.fail_stop:
            raise ProvisioningError("stub environment failed to stop")

    def endpoint(self, service) -> str:
        return STUB_URL
