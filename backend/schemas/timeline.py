"""
Timeline schemas: milestone events of all jobs, joined with the job they belong to.
"""

from datetime import date, datetime, time
from math import ceil
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field, model_validator

from models.enums import EventType, InterviewResult, InterviewType
from schemas.base import CamelModel, WallClockDateTime, parse_wall_clock

# Event types shown on the timeline
TIMELINE_EVENT_TYPES = (
    EventType.APPLIED,
    EventType.INTERVIEW,
    EventType.REJECTED,
    EventType.OFFER_RECEIVED,
    EventType.OFFER_ACCEPTED,
)

DEFAULT_TIMELINE_PAGE_SIZE = 50


def _end_of_day(value: Any) -> Any:
    """A date-only upper bound includes the whole day."""
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.combine(date.fromisoformat(value.strip()), time.max)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.max)
    return parse_wall_clock(value)


class TimelineQuery(CamelModel):
    """Page and inclusive date range for fetchTimelineEvents."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_TIMELINE_PAGE_SIZE, ge=1)
    date_from: Optional[WallClockDateTime] = None
    date_to: Optional[Annotated[datetime, BeforeValidator(_end_of_day)]] = None

    @model_validator(mode="after")
    def _range_in_order(self) -> "TimelineQuery":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("dateFrom must not be after dateTo")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def matches(self, event_type: EventType, event_date: datetime) -> bool:
        """In-memory version of the filter (mock provider)."""
        if event_type not in TIMELINE_EVENT_TYPES:
            return False
        if self.date_from is not None and event_date < self.date_from:
            return False
        if self.date_to is not None and event_date > self.date_to:
            return False
        return True


class TimelineEvent(CamelModel):
    """A job event with the company, position and location of its job."""
    id: int
    job_id: int
    company: str
    position: str
    location: Optional[str] = None
    event_type: EventType
    event_date: datetime
    title: Optional[str] = None
    description: Optional[str] = None
    interview_round: Optional[int] = None
    interview_type: Optional[InterviewType] = None
    interview_link: Optional[str] = None
    interview_result: Optional[InterviewResult] = None
    notes: Optional[str] = None
    metadata: Optional[Any] = None


class TimelinePagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def for_query(cls, query: TimelineQuery, total: int) -> "TimelinePagination":
        total_pages = ceil(total / query.limit) if total else 0
        return cls(
            page=query.page,
            limit=query.limit,
            total=total,
            total_pages=total_pages,
            has_more=query.page < total_pages,
        )


class TimelinePage(CamelModel):
    """Response for GET /timeline-events."""
    events: list[TimelineEvent]
    pagination: TimelinePagination
