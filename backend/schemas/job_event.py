"""
JobEvent schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, ValidationInfo, field_validator

from models.enums import EventType, InterviewResult, InterviewType
from schemas.base import CamelModel, NonEmptyStr, WallClockDateTime, reject_null


class JobEventCreate(CamelModel):
    """Request for POST /job-events."""
    job_id: int = Field(gt=0)
    event_type: EventType
    event_date: WallClockDateTime
    title: NonEmptyStr
    description: Optional[str] = None
    interview_round: Optional[int] = Field(default=None, gt=0)
    interview_type: Optional[InterviewType] = None
    interview_link: Optional[str] = None
    interview_result: Optional[InterviewResult] = None
    notes: Optional[str] = None
    metadata: Optional[Any] = None


class JobEventUpdate(CamelModel):
    """Request for PUT /job-events/{id}. Only fields sent are changed."""
    event_type: Optional[EventType] = None
    event_date: Optional[WallClockDateTime] = None
    title: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    interview_round: Optional[int] = Field(default=None, gt=0)
    interview_type: Optional[InterviewType] = None
    interview_link: Optional[str] = None
    interview_result: Optional[InterviewResult] = None
    notes: Optional[str] = None
    metadata: Optional[Any] = None

    @field_validator("event_type", "event_date", "title")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        return reject_null(value, info.field_name)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class JobEvent(CamelModel):
    """A lifecycle event, as returned by every provider."""
    id: int
    job_id: int
    event_type: EventType
    event_date: datetime
    title: str
    description: Optional[str] = None
    interview_round: Optional[int] = None
    interview_type: Optional[InterviewType] = None
    interview_link: Optional[str] = None
    interview_result: Optional[InterviewResult] = None
    notes: Optional[str] = None
    metadata: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkDeleteEventsRequest(CamelModel):
    """Request for DELETE /job-events/bulk-delete."""
    job_id: int = Field(gt=0)
    event_types: list[EventType] = Field(min_length=1)
