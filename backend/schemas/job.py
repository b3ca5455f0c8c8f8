"""
Job schemas: create/update payloads, the read model, list filters and stats.
"""

from datetime import date, datetime
from math import ceil
from typing import Iterable, Optional, Union

from pydantic import Field, ValidationInfo, field_validator

from models.enums import JobStatus
from schemas.base import CamelModel, NonEmptyStr, reject_null


class JobCreate(CamelModel):
    """Request for POST /jobs. status and isFavorite have defaults."""
    company: NonEmptyStr
    position: NonEmptyStr
    job_url: Optional[str] = None
    application_date: date
    status: JobStatus = JobStatus.APPLIED
    location: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None
    place_id: Optional[str] = None
    is_favorite: bool = False


class JobUpdate(CamelModel):
    """
    Request for PUT /jobs/{id}. All fields optional.

    Omitted fields keep their stored value. Optional text fields can be
    cleared with an explicit null; required fields cannot.
    """
    company: Optional[NonEmptyStr] = None
    position: Optional[NonEmptyStr] = None
    job_url: Optional[str] = None
    application_date: Optional[date] = None
    status: Optional[JobStatus] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None
    place_id: Optional[str] = None
    is_favorite: Optional[bool] = None

    @field_validator("company", "position", "application_date", "status", "is_favorite")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info.field_name)

    def changes(self) -> dict:
        """Fields explicitly sent by the caller, in snake_case."""
        return self.model_dump(exclude_unset=True)


class Job(CamelModel):
    """A tracked application, as returned by every provider."""
    id: int
    company: str
    position: str
    job_url: Optional[str] = None
    application_date: date
    status: JobStatus = JobStatus.APPLIED
    location: Optional[str] = None
    notes: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    formatted_address: Optional[str] = None
    place_id: Optional[str] = None
    is_favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobQuery(CamelModel):
    """Filter and page for fetchJobs. status "all" (or omitted) means no status filter."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    search: Optional[str] = None
    status: Optional[JobStatus] = None
    favorites: bool = False

    @field_validator("status", mode="before")
    @classmethod
    def _all_means_none(cls, value: Union[str, JobStatus, None]):
        if isinstance(value, str) and value.strip().lower() in ("", "all"):
            return None
        return value

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search_means_none(cls, value: Optional[str]):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def matches(self, job: Job) -> bool:
        """In-memory version of the filter (mock provider)."""
        if self.search:
            needle = self.search.lower()
            if needle not in job.company.lower() and needle not in job.position.lower():
                return False
        if self.status is not None and job.status != self.status:
            return False
        if self.favorites and not job.is_favorite:
            return False
        return True


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def for_query(cls, query: JobQuery, total: int) -> "Pagination":
        return cls(
            page=query.page,
            limit=query.limit,
            total=total,
            total_pages=ceil(total / query.limit) if total else 0,
        )


class JobPage(CamelModel):
    """Response for GET /jobs."""
    jobs: list[Job]
    pagination: Pagination


class JobStats(CamelModel):
    """Response for GET /stats."""
    total_applications: int = 0
    active_interviews: int = 0
    offers_received: int = 0
    favorites: int = 0
    applied_count: int = 0
    rejected_count: int = 0
    accepted_count: int = 0

    @classmethod
    def from_jobs(cls, jobs: list[Job]) -> "JobStats":
        """Aggregate in Python (mock provider)."""
        return cls.tally((job.status, job.is_favorite) for job in jobs)

    @classmethod
    def tally(cls, rows: Iterable[tuple[JobStatus, bool]]) -> "JobStats":
        """Aggregate (status, is_favorite) pairs."""
        stats = cls()
        for status, is_favorite in rows:
            status = JobStatus(status)
            stats.total_applications += 1
            if is_favorite:
                stats.favorites += 1
            if status == JobStatus.INTERVIEW:
                stats.active_interviews += 1
            elif status == JobStatus.OFFER:
                stats.offers_received += 1
            elif status == JobStatus.APPLIED:
                stats.applied_count += 1
            elif status == JobStatus.REJECTED:
                stats.rejected_count += 1
            elif status == JobStatus.ACCEPTED:
                stats.accepted_count += 1
        return stats
