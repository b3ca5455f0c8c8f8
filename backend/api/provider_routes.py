"""
API routes for storage provider selection.

Endpoints:
- GET /api/provider    Current and selectable providers
- PUT /api/provider    Switch provider (409 while signed in, or if not selectable)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from auth.dependencies import get_optional_user
from auth.models import AuthenticatedUser
from models.enums import ProviderKind
from schemas.base import CamelModel
from session.context import ProviderSession, get_provider_session

logger = logging.getLogger(__name__)

router = APIRouter()


class ProviderSelection(CamelModel):
    provider: ProviderKind


class ProviderStatusResponse(CamelModel):
    provider: ProviderKind          # Effective provider for this caller
    authenticated: bool
    selectable: list[ProviderKind]
    default: ProviderKind
    deployment: Optional[ProviderKind] = None


def _status(session: ProviderSession, user: Optional[AuthenticatedUser]) -> ProviderStatusResponse:
    return ProviderStatusResponse(
        provider=session.resolve(authenticated=user is not None),
        authenticated=user is not None,
        selectable=session.selectable,
        default=session.default,
        deployment=session.deployment,
    )


@router.get("", response_model=ProviderStatusResponse)
async def get_provider_status(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    session: ProviderSession = Depends(get_provider_session),
):
    return _status(session, user)


@router.put("", response_model=ProviderStatusResponse)
async def select_provider(
    request: ProviderSelection,
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    session: ProviderSession = Depends(get_provider_session),
):
    """
    Switch the storage provider.

    The choice is persisted and survives restarts. Signed-in callers are
    pinned to the hosted provider and get 409 for any other choice.
    """
    session.select(request.provider, authenticated=user is not None)
    return _status(session, user)
