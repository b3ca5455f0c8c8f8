"""
API routes for job lifecycle events.

Endpoints:
- GET    /api/job-events?jobId=              Events (of one job, or all), newest first
- POST   /api/job-events                     Create event (may update the job's status)
- DELETE /api/job-events/bulk-delete         Delete a job's events of the given types
- PUT    /api/job-events/{event_id}          Partial update (never changes job status)
- DELETE /api/job-events/{event_id}          Delete event (never changes job status)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_provider
from errors import ensure_valid_id
from providers.base import StorageProvider
from schemas import BulkDeleteEventsRequest, JobEvent, JobEventCreate, JobEventUpdate
from schemas.base import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class SuccessResponse(CamelModel):
    success: bool = True


class BulkDeleteResponse(CamelModel):
    success: bool = True
    deleted: int


@router.get("", response_model=list[JobEvent])
async def list_job_events(
    job_id: Optional[str] = Query(None, alias="jobId"),
    provider: StorageProvider = Depends(get_provider),
):
    if job_id is not None:
        job_id = ensure_valid_id(job_id, "Job")
    return await provider.fetch_job_events(job_id)


@router.post("", response_model=JobEvent, status_code=status.HTTP_201_CREATED)
async def create_job_event(
    request: JobEventCreate,
    provider: StorageProvider = Depends(get_provider),
):
    """
    Create an event for an existing job.

    The job's status follows the event type (interview_scheduled/interview ->
    interview, rejected -> rejected, offer_received -> offer, offer_accepted ->
    accepted, latest failed interview_result -> rejected).

    Example:
        POST /api/job-events
        {"jobId": 3, "eventType": "interview", "eventDate": "2024-03-05T14:30",
         "title": "Onsite", "interviewType": "onsite", "interviewRound": 2}
    """
    return await provider.create_job_event(request)


# Declared before /{event_id} so "bulk-delete" is not taken for an id
@router.delete("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_job_events(
    request: BulkDeleteEventsRequest,
    provider: StorageProvider = Depends(get_provider),
):
    deleted = await provider.delete_job_events_by_type(request.job_id, request.event_types)
    return BulkDeleteResponse(deleted=deleted)


@router.put("/{event_id}", response_model=SuccessResponse)
async def update_job_event(
    event_id: str,
    request: JobEventUpdate,
    provider: StorageProvider = Depends(get_provider),
):
    await provider.update_job_event(ensure_valid_id(event_id, "Event"), request)
    return SuccessResponse()


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_job_event(
    event_id: str,
    provider: StorageProvider = Depends(get_provider),
):
    await provider.delete_job_event(ensure_valid_id(event_id, "Event"))
    return SuccessResponse()
