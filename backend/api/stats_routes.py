from fastapi import APIRouter, Depends

from api.dependencies import get_provider
from providers.base import StorageProvider
from schemas import JobStats

router = APIRouter()


@router.get("", response_model=JobStats)
async def get_stats(provider: StorageProvider = Depends(get_provider)):
    """
    Dashboard counters for the active provider

    Example response:
        {"totalApplications": 11, "activeInterviews": 3, "offersReceived": 1,
         "favorites": 4, "appliedCount": 5, "rejectedCount": 1, "acceptedCount": 1}
    """
    return await provider.fetch_stats()
