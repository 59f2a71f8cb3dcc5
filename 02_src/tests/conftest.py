"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from stub_services import StubProvisioner, StubState, create_stub_app  # noqa: E402

# 2024-01-01T10:00:00Z
BASE_MS = 1704103200000


@pytest.fixture
def recording_events():
    """Events of a small recording, as printed by `jfr print --json`."""
    return [
        {
            "type": "jdk.CPULoad",
            "values": {
                "startTime": "2024-01-01T10:00:00.123456789Z",
                "jvmUser": 0.12,
                "jvmSystem": 0.01,
                "machineTotal": 0.5,
            },
        },
        {
            "type": "jdk.GarbageCollection",
            "values": {
                "startTime": "2024-01-01T10:00:05+00:00",
                "duration": "PT0.25S",
                "name": "G1New",
                "gcId": 1,
            },
        },
        {
            "type": "jdk.ThreadSleep",
            "values": {
                "startTime": "2024-01-01T11:00:30+01:00",
                "duration": "PT2.5S",
                "time": "PT2.5S",
            },
        },
    ]


@pytest.fixture
def write_recording(tmp_path):
    """Write a JSON recording with the given events and return its path."""

    def _write(events, name="recording.json"):
        path = tmp_path / name
        path.write_text(json.dumps({"recording": {"events": events}}), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def recording(write_recording, recording_events):
    """A valid recording spanning [BASE_MS + 123, BASE_MS + 32500]."""
    return write_recording(recording_events)


@pytest.fixture
def layout_path(tmp_path):
    """A three panel dashboard layout."""
    path = tmp_path / "layout.json"
    path.write_text(
        json.dumps(
            {
                "title": "JFR Events",
                "panels": [
                    {"id": 1, "title": "CPU Load", "type": "graph"},
                    {"id": 2, "title": "Heap Usage", "type": "graph"},
                    {"id": 3, "title": "GC Pause", "type": "graph"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def settings(layout_path):
    """Settings pointing at the test layout."""
    from panel_export.config import Settings

    return Settings(panel_layout_path=layout_path, max_concurrency=4)


@pytest.fixture
def stub_state():
    """State of the stub services."""
    return StubState()


@pytest.fixture
def stub_app(stub_state):
    """FastAPI app serving the stub services."""
    return create_stub_app(stub_state)


@pytest.fixture
def client_factory(stub_app):
    """Create httpx clients routed to the stub app."""

    def _factory():
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=stub_app))

    return _factory


@pytest_asyncio.fixture
async def client(client_factory):
    """httpx client routed to the stub app."""
    async with client_factory() as c:
        yield c


@pytest.fixture
def provisioner():
    """Stub environment provisioner."""
    return StubProvisioner()
