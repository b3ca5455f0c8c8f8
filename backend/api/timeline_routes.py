"""
API routes for the application timeline.

Endpoints:
- GET /api/timeline-events    Milestone events of all jobs, newest first
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_provider
from config.settings import settings
from providers.base import StorageProvider
from schemas import TimelinePage, TimelineQuery
from schemas.timeline import DEFAULT_TIMELINE_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=TimelinePage)
async def list_timeline_events(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_TIMELINE_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    provider: StorageProvider = Depends(get_provider),
):
    """
    Applied, interview, rejected and offer events with their job's company,
    position and location. dateFrom/dateTo are inclusive; a date-only dateTo
    covers the whole day.

    Example:
        GET /api/timeline-events?page=1&limit=50&dateFrom=2024-03-01&dateTo=2024-03-31

        Response:
        {
            "events": [{"id": 7, "jobId": 3, "company": "Acme", "eventType": "interview", ...}],
            "pagination": {"page": 1, "limit": 50, "total": 1, "totalPages": 1, "hasMore": false}
        }
    """
    query = TimelineQuery(page=page, limit=limit, date_from=date_from, date_to=date_to)
    return await provider.fetch_timeline_events(query)
