"""Pydantic schemas shared by the REST layer, the providers and the client."""

from schemas.job import Job, JobCreate, JobUpdate, JobQuery, JobPage, Pagination, JobStats
from schemas.job_event import JobEvent, JobEventCreate, JobEventUpdate, BulkDeleteEventsRequest
from schemas.timeline import TimelineEvent, TimelinePage, TimelinePagination, TimelineQuery

__all__ = [
    "Job",
    "JobCreate",
    "JobUpdate",
    "JobQuery",
    "JobPage",
    "Pagination",
    "JobStats",
    "JobEvent",
    "JobEventCreate",
    "JobEventUpdate",
    "BulkDeleteEventsRequest",
    "TimelineEvent",
    "TimelinePage",
    "TimelinePagination",
    "TimelineQuery",
]
