"""Recording upload to the ingestion service."""

from pathlib import Path
from typing import Protocol

import httpx

from ..errors import UploadError
from ..logging_config import get_logger

logger = get_logger(__name__)

LOAD_PATH = "/load"


class IRecordingUploader(Protocol):
    """Push a raw recording to the ingestion service."""

    async def upload(self, path: Path) -> None:
        """Upload the recording as multipart field `file`."""
        ...


class RecordingUploader:
    """Single multipart upload, no retry."""

    def __init__(self, base_url: str, client: httpx.AsyncClient):
        self._base_url = base_url.rstrip("/")
        self._client = client

    async def upload(self, path: Path) -> None:
        """Upload the recording as multipart field `file`."""
        path = Path(path)
        try:
            with path.open("rb") as recording:
                response = await self._client.post(
                    f"{self._base_url}{LOAD_PATH}",
                    files={"file": (path.name, recording, "application/octet-stream")},
                )
        except OSError as e:
            raise UploadError(f"cannot read recording {path}: {e}") from e
        except httpx.HTTPError as e:
            raise UploadError(f"upload of {path.name} failed: {e}") from e

        logger.info("Ingestion response\n%s", response.text)
        logger.info("Ingestion response code %d", response.status_code)

        if response.is_error:
            raise UploadError(
                f"upload of {path.name} failed with status {response.status_code}"
            )
