from fastapi import APIRouter

from api.job_events_routes import router as job_events_router
from api.jobs_routes import router as jobs_router
from api.places_routes import router as places_router
from api.provider_routes import router as provider_router
from api.stats_routes import router as stats_router
from api.timeline_routes import router as timeline_router

router = APIRouter()

router.include_router(jobs_router, prefix="/jobs", tags=["Jobs"])
router.include_router(job_events_router, prefix="/job-events", tags=["Job Events"])
router.include_router(stats_router, prefix="/stats", tags=["Stats"])
router.include_router(timeline_router, prefix="/timeline-events", tags=["Timeline"])
router.include_router(provider_router, prefix="/provider", tags=["Provider"])
router.include_router(places_router, prefix="/places", tags=["Places"])
