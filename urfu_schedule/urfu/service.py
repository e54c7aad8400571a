from typing import List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from urfu_schedule.config import settings
from urfu_schedule.logger import setup_logger
from urfu_schedule.urfu.errors import DecodeError, NetworkError, ScheduleError
from urfu_schedule.urfu.schemas import (
    GroupInfo,
    ScheduleEvent,
    ScheduleQuery,
    ScheduleResponse,
    ScheduleResult,
)

logger = setup_logger(__name__, settings.LOG_LEVEL)


class ScheduleService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.transport = transport
        self.headers = {"User-Agent": settings.USER_AGENT}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.headers,
            follow_redirects=True,
            timeout=self.timeout,
            transport=self.transport,
        )

    def build_schedule_url(self, query: ScheduleQuery) -> httpx.URL:
        group = quote(query.group_id, safe="")
        return httpx.URL(
            f"{self.base_url}/schedule/groups/{group}/schedule",
            params={
                "date_gte": query.start_date.strftime("%Y-%m-%d"),
                "date_lte": query.end_date.strftime("%Y-%m-%d"),
            },
        )

    async def _request(self, url: httpx.URL) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(f"Request to {url} failed: {e!r}") from e

    async def fetch_events(self, query: ScheduleQuery) -> List[ScheduleEvent]:
        url = self.build_schedule_url(query)
        logger.info(
            f"🌐 Requesting schedule for group {query.group_id} "
            f"({query.start_date} - {query.end_date})"
        )

        response = await self._request(url)

        # the body is decoded regardless; a failed decode reports the status
        if not response.is_success:
            logger.warning(f"Error {response.status_code}: {response.text[:200]}")

        try:
            json_data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Schedule response is not valid JSON: {e}", response.status_code
            ) from e

        try:
            schedule = ScheduleResponse.model_validate(json_data)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected schedule response shape: {e}", response.status_code
            ) from e

        logger.info(f"Received {len(schedule.events)} events for group {query.group_id}")
        return schedule.events

    async def get_schedule(self, query: ScheduleQuery) -> ScheduleResult:
        try:
            events = await self.fetch_events(query)
        except ScheduleError as e:
            return ScheduleResult(error=e)

        return ScheduleResult(events=events)

    async def search_groups(
        self, search: str, limit: Optional[int] = None
    ) -> List[GroupInfo]:
        limit = limit if limit is not None else settings.SEARCH_LIMIT
        url = httpx.URL(f"{self.base_url}/schedule/groups", params={"search": search})
        logger.info(f"🌐 Searching groups for {search!r}")

        response = await self._request(url)

        if not response.is_success:
            logger.error(f"Error {response.status_code}: {response.text[:200]}")
            return []

        try:
            json_data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Group search response is not valid JSON: {e}", response.status_code
            ) from e

        if not isinstance(json_data, list):
            raise DecodeError(
                f"Group search returned {type(json_data).__name__}, expected a list",
                response.status_code,
            )

        groups = []
        for item in json_data[:limit]:
            try:
                groups.append(GroupInfo.model_validate(item))
            except ValidationError:
                logger.warning(f"Skipping malformed group entry: {item!r}")

        return groups
