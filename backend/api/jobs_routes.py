"""
API routes for tracked job applications.

Endpoints:
- GET    /api/jobs                              Filtered, paginated list
- POST   /api/jobs                              Create job (+ its 'applied' event)
- GET    /api/jobs/{job_id}                     Job details
- PUT    /api/jobs/{job_id}                     Partial update
- DELETE /api/jobs/{job_id}                     Delete job and its events
- PUT    /api/jobs/{job_id}/favorite            Set favorite flag
- POST   /api/jobs/{job_id}/recompute-status    Rebuild status from event history

Interactive API docs:
- Swagger UI: http://localhost:8000/docs
- ReDoc: http://localhost:8000/redoc
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_provider
from config.settings import settings
from errors import ensure_valid_id
from models.enums import JobStatus
from providers.base import StorageProvider
from schemas import Job, JobCreate, JobPage, JobQuery, JobUpdate
from schemas.base import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class SuccessResponse(CamelModel):
    success: bool = True


class FavoriteRequest(CamelModel):
    """Request for PUT /api/jobs/{job_id}/favorite. isFavorite is the new value."""
    is_favorite: bool


class FavoriteResponse(CamelModel):
    success: bool = True
    is_favorite: bool


class StatusResponse(CamelModel):
    """Response for POST /api/jobs/{job_id}/recompute-status."""
    status: JobStatus


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=JobPage)
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    favorites: bool = False,
    provider: StorageProvider = Depends(get_provider),
):
    """
    List jobs, newest application first.

    Example:
        GET /api/jobs?page=1&limit=10&search=eng&status=interview&favorites=true

        Response:
        {
            "jobs": [{"id": 3, "company": "Acme", "position": "Engineer", ...}],
            "pagination": {"page": 1, "limit": 10, "total": 1, "totalPages": 1}
        }
    """
    query = JobQuery(page=page, limit=limit, search=search, status=status_filter, favorites=favorites)
    return await provider.fetch_jobs(query)


@router.post("", response_model=Job, status_code=status.HTTP_201_CREATED)
async def create_job(
    request: JobCreate,
    provider: StorageProvider = Depends(get_provider),
):
    """Create a job; an 'applied' event is recorded with it."""
    return await provider.create_job(request)


@router.get("/{job_id}", response_model=Job)
async def get_job(
    job_id: str,
    provider: StorageProvider = Depends(get_provider),
):
    return await provider.get_job(ensure_valid_id(job_id, "Job"))


@router.put("/{job_id}", response_model=SuccessResponse)
async def update_job(
    job_id: str,
    request: JobUpdate,
    provider: StorageProvider = Depends(get_provider),
):
    """
    Partially update a job.

    Fields not sent keep their value; optional fields sent as null are cleared.
    Status is normally driven by events but can be set manually here.
    """
    await provider.update_job(ensure_valid_id(job_id, "Job"), request)
    return SuccessResponse()


@router.delete("/{job_id}", response_model=SuccessResponse)
async def delete_job(
    job_id: str,
    provider: StorageProvider = Depends(get_provider),
):
    await provider.delete_job(ensure_valid_id(job_id, "Job"))
    return SuccessResponse()


@router.put("/{job_id}/favorite", response_model=FavoriteResponse)
async def set_favorite(
    job_id: str,
    request: FavoriteRequest,
    provider: StorageProvider = Depends(get_provider),
):
    # toggle_favorite flips current_value, so pass the opposite of the wanted value
    await provider.toggle_favorite(ensure_valid_id(job_id, "Job"), current_value=not request.is_favorite)
    return FavoriteResponse(is_favorite=request.is_favorite)


@router.post("/{job_id}/recompute-status", response_model=StatusResponse)
async def recompute_job_status(
    job_id: str,
    provider: StorageProvider = Depends(get_provider),
):
    """
    Rebuild the job's status from its event history.

    Repairs a job whose automatic status update was lost. Jobs whose
    events imply no status keep their current one.
    """
    new_status = await provider.recompute_job_status(ensure_valid_id(job_id, "Job"))
    logger.info(f"Recomputed status of job {job_id}: {new_status.value}")
    return StatusResponse(status=new_status)
