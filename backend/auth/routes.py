"""
Identity endpoints (hosted backend auth).

Signed-in callers are served by the hosted provider, decided per request
from their Bearer token. Signing in leaves the provider of anonymous
callers unchanged; signing out while hosted is the shared preference
switches it back to mock data.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from auth.dependencies import get_current_user, get_optional_user
from auth.identity import IdentityService, get_identity_service
from auth.models import (
    AuthenticatedUser,
    InviteRequest,
    PasswordChangeRequest,
    ResetPasswordRequest,
    SessionResponse,
    SignInRequest,
)
from config.settings import settings
from errors import PermissionDeniedError
from session.context import ProviderSession, get_provider_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    request: SignInRequest,
    identity: IdentityService = Depends(get_identity_service),
    session: ProviderSession = Depends(get_provider_session),
):
    """
    Sign in with email and password

    Flow:
    1. Hosted auth service verifies the credentials
    2. Client stores the access token and sends it as a Bearer token
    3. Requests carrying the token are served by the hosted provider;
       anonymous callers keep their own provider
    """
    identity_session = identity.sign_in(request.email, request.password)
    state = session.sign_in()

    return SessionResponse(
        authenticated=True,
        provider=state.effective_provider,
        user_id=identity_session.user_id,
        email=identity_session.email,
        access_token=identity_session.access_token,
        refresh_token=identity_session.refresh_token,
        expires_in=identity_session.expires_in,
    )


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(
    current_user: AuthenticatedUser = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
    session: ProviderSession = Depends(get_provider_session),
):
    identity.sign_out(current_user.access_token)
    state = session.sign_out()
    logger.info(f"Signed out user {current_user.user_id}")
    return SessionResponse(authenticated=False, provider=state.effective_provider)


@router.get("/session", response_model=SessionResponse)
async def get_session(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    session: ProviderSession = Depends(get_provider_session),
):
    """Current identity (from the Bearer token, no auth-service call) and provider"""
    provider = session.resolve(authenticated=user is not None)
    if user is None:
        return SessionResponse(authenticated=False, provider=provider)
    return SessionResponse(authenticated=True, provider=provider, user_id=user.user_id, email=user.email)


@router.post("/password")
async def change_password(
    request: PasswordChangeRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
):
    identity.update_password(current_user.user_id, request.password)
    return {"success": True}


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    """Send a password-reset email (always succeeds for unknown emails too)"""
    identity.reset_password(request.email, request.redirect_to)
    return {"success": True}


@router.post("/invite")
async def invite_user(
    request: InviteRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    identity: IdentityService = Depends(get_identity_service),
):
    """
    Invite a new user by email (service-role call).

    Only callers whose email is listed in ADMIN_EMAILS may invite.
    """
    if (current_user.email or "").lower() not in settings.get_admin_emails():
        logger.warning(f"User {current_user.user_id} is not allowed to invite users")
        raise PermissionDeniedError("Only administrators can invite users")
    identity.invite(request.email, request.redirect_to)
    logger.info(f"User {current_user.user_id} invited {request.email}")
    return {"success": True}
