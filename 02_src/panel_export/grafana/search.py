"""Dashboard lookup through the visualization service search API."""

from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import SearchError
from ..logging_config import get_logger

logger = get_logger(__name__)

SEARCH_PATH = "/api/search"
SEARCH_PARAMS = {"folderIds": 0, "query": "", "starred": "false"}


class DashboardSummary(BaseModel):
    """One hit of the search API."""

    model_config = ConfigDict(extra="ignore")

    uid: str
    title: str
    type: str | None = None


_summaries = TypeAdapter(list[DashboardSummary])


class IDashboardResolver(Protocol):
    """Look up a dashboard identifier by title."""

    async def resolve(self, title: str) -> str | None:
        """Return the uid of the dashboard titled exactly `title`, or None."""
        ...


class DashboardResolver:
    """Resolves dashboard uids with one authenticated search call."""

    def __init__(self, base_url: str, client: httpx.AsyncClient, auth: tuple[str, str]):
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._auth = auth

    async def resolve(self, title: str) -> str | None:
        """Return the uid of the dashboard titled exactly `title`, or None.

        When several dashboards share the title, the last one in search
        order wins.
        """
        try:
            response = await self._client.get(
                f"{self._base_url}{SEARCH_PATH}",
                params=SEARCH_PARAMS,
                auth=self._auth,
            )
        except httpx.HTTPError as e:
            raise SearchError(f"dashboard search failed: {e}") from e

        if response.is_error:
            raise SearchError(f"dashboard search failed with status {response.status_code}")

        try:
            summaries = _summaries.validate_json(response.content)
        except ValidationError as e:
            raise SearchError(f"unexpected dashboard search response: {e}") from e

        uid = None
        for summary in summaries:
            if summary.title == title:
                uid = summary.uid

        logger.info("Dashboard uid %s", uid)
        return uid
