"""
Async HTTP client for the job tracker API.

Reads go through a QueryCache; every mutation and every provider change
invalidates it so the next read re-fetches. Any non-2xx response raises
ApiError carrying the server's {"error"} message.

Usage:
    async with JobTrackerClient("http://localhost:8000") as client:
        await client.ensure_storage()          # falls back to mock if storage is down
        page = await client.fetch_jobs(JobQuery(status="interview"))
"""

import logging
from typing import Any, Callable, Optional

import httpx

from client.cache import QueryCache, make_key
from client.debounce import DEFAULT_DELAY_SECONDS, Debouncer
from errors import JobTrackerError
from models.enums import EventType, JobStatus, ProviderKind
from schemas import (
    Job,
    JobCreate,
    JobEvent,
    JobEventCreate,
    JobEventUpdate,
    JobPage,
    JobQuery,
    JobStats,
    JobUpdate,
    TimelinePage,
    TimelineQuery,
)

logger = logging.getLogger(__name__)


class ApiError(JobTrackerError):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error)
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase


class JobTrackerClient:
    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            base_url: Server root (the /api and /auth prefixes are added here)
            access_token: Hosted-backend access token, if already signed in
            transport: Custom httpx transport (tests)
            timeout: Request timeout in seconds
        """
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.access_token = access_token
        self.cache = QueryCache()
        self.provider: Optional[ProviderKind] = None
        self._listeners: list[Callable[[ProviderKind], None]] = []

    async def __aenter__(self) -> "JobTrackerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(503, f"Could not reach the server: {e}", original_error=e)

        if not response.is_success:
            raise ApiError(response.status_code, _error_message(response))
        return response.json() if response.content else None

    async def _read(self, path: str, params: Optional[dict] = None) -> Any:
        # httpx would send None as an empty value
        params = {key: value for key, value in (params or {}).items() if value is not None}
        return await self.cache.get_or_fetch(
            make_key(path, params),
            lambda: self._request("GET", path, params=params),
        )

    async def _write(self, method: str, path: str, **kwargs) -> Any:
        result = await self._request(method, path, **kwargs)
        self.cache.invalidate_all()
        return result

    # -------------------------------------------------------------------------
    # Provider selection
    # -------------------------------------------------------------------------

    def on_provider_change(self, listener: Callable[[ProviderKind], None]) -> None:
        self._listeners.append(listener)

    def _track_provider(self, provider: ProviderKind) -> None:
        if self.provider is not None and provider != self.provider:
            logger.info(f"Provider changed: {self.provider.value} -> {provider.value}")
            self.cache.invalidate_all()
            for listener in list(self._listeners):
                listener(provider)
        self.provider = provider

    async def get_provider(self) -> dict:
        data = await self._request("GET", "/api/provider")
        self._track_provider(ProviderKind(data["provider"]))
        return data

    async def select_provider(self, provider: ProviderKind) -> dict:
        """
        Raises:
            ApiError: 409 if signed in (hosted only) or provider not selectable
        """
        data = await self._request("PUT", "/api/provider", json={"provider": ProviderKind(provider).value})
        self._track_provider(ProviderKind(data["provider"]))
        return data

    async def probe_storage(self) -> bool:
        """True if the active provider's storage answers."""
        try:
            await self._request("GET", "/health/storage")
        except ApiError as e:
            logger.warning(f"Storage probe failed ({e.status_code}): {e.message}")
            return False
        return True

    async def ensure_storage(self, fallback_to_mock: bool = True) -> ProviderKind:
        """
        Probe storage; when it is unreachable, switch to mock data.

        Returns:
            The provider in use after the check
        """
        status = await self.get_provider()
        current = ProviderKind(status["provider"])
        if await self.probe_storage() or current == ProviderKind.MOCK or not fallback_to_mock:
            return current
        logger.warning(f"Storage for '{current.value}' is unreachable, switching to mock data")
        status = await self.select_provider(ProviderKind.MOCK)
        return ProviderKind(status["provider"])

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> dict:
        data = await self._request("POST", "/auth/sign-in", json={"email": email, "password": password})
        self.access_token = data["access_token"]
        self._track_provider(ProviderKind(data["provider"]))
        self.cache.invalidate_all()
        return data

    async def sign_out(self) -> dict:
        data = await self._request("POST", "/auth/sign-out")
        self.access_token = None
        self._track_provider(ProviderKind(data["provider"]))
        self.cache.invalidate_all()
        return data

    # -------------------------------------------------------------------------
    # Jobs
    # -------------------------------------------------------------------------

    async def fetch_jobs(self, query: Optional[JobQuery] = None) -> JobPage:
        query = query or JobQuery()
        params = {
            "page": query.page,
            "limit": query.limit,
            "search": query.search,
            "status": query.status.value if query.status else None,
            "favorites": "true" if query.favorites else None,
        }
        return JobPage.model_validate(await self._read("/api/jobs", params))

    def search_debouncer(
        self,
        on_results: Callable[[JobPage], Any],
        delay: float = DEFAULT_DELAY_SECONDS,
    ) -> Debouncer:
        """
        Debounced search: debouncer.trigger("acme") fetches once typing pauses.

        Args:
            on_results: Called with the JobPage of the last search term
            delay: Quiet period in seconds
        """
        async def search(term: str, **filters) -> JobPage:
            page = await self.fetch_jobs(JobQuery(search=term, **filters))
            on_results(page)
            return page

        return Debouncer(search, delay=delay)

    async def get_job(self, job_id: int) -> Job:
        return Job.model_validate(await self._read(f"/api/jobs/{job_id}"))

    async def create_job(self, data: JobCreate) -> Job:
        payload = data.model_dump(by_alias=True, mode="json")
        return Job.model_validate(await self._write("POST", "/api/jobs", json=payload))

    async def update_job(self, job_id: int, data: JobUpdate) -> None:
        payload = data.model_dump(by_alias=True, mode="json", exclude_unset=True)
        await self._write("PUT", f"/api/jobs/{job_id}", json=payload)

    async def delete_job(self, job_id: int) -> None:
        await self._write("DELETE", f"/api/jobs/{job_id}")

    async def set_favorite(self, job_id: int, is_favorite: bool) -> None:
        await self._write("PUT", f"/api/jobs/{job_id}/favorite", json={"isFavorite": is_favorite})

    async def recompute_status(self, job_id: int) -> JobStatus:
        data = await self._write("POST", f"/api/jobs/{job_id}/recompute-status")
        return JobStatus(data["status"])

    async def fetch_stats(self) -> JobStats:
        return JobStats.model_validate(await self._read("/api/stats"))

    async def fetch_timeline_events(self, query: Optional[TimelineQuery] = None) -> TimelinePage:
        query = query or TimelineQuery()
        params = {
            "page": query.page,
            "limit": query.limit,
            "dateFrom": query.date_from.isoformat() if query.date_from else None,
            "dateTo": query.date_to.isoformat() if query.date_to else None,
        }
        return TimelinePage.model_validate(await self._read("/api/timeline-events", params))

    # -------------------------------------------------------------------------
    # Job events
    # -------------------------------------------------------------------------

    async def fetch_job_events(self, job_id: Optional[int] = None) -> list[JobEvent]:
        data = await self._read("/api/job-events", {"jobId": job_id})
        return [JobEvent.model_validate(item) for item in data]

    async def create_job_event(self, data: JobEventCreate) -> JobEvent:
        payload = data.model_dump(by_alias=True, mode="json")
        return JobEvent.model_validate(await self._write("POST", "/api/job-events", json=payload))

    async def update_job_event(self, event_id: int, data: JobEventUpdate) -> None:
        payload = data.model_dump(by_alias=True, mode="json", exclude_unset=True)
        await self._write("PUT", f"/api/job-events/{event_id}", json=payload)

    async def delete_job_event(self, event_id: int) -> None:
        await self._write("DELETE", f"/api/job-events/{event_id}")

    async def delete_job_events_by_type(self, job_id: int, event_types: list[EventType]) -> int:
        payload = {"jobId": job_id, "eventTypes": [EventType(t).value for t in event_types]}
        data = await self._write("DELETE", "/api/job-events/bulk-delete", json=payload)
        return data["deleted"]
