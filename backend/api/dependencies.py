from typing import Optional

from fastapi import Depends

from auth.dependencies import get_optional_user
from auth.models import AuthenticatedUser
from providers.base import StorageProvider
from providers.registry import resolve_provider
from session.context import ProviderSession, get_provider_session


async def get_provider(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    session: ProviderSession = Depends(get_provider_session),
) -> StorageProvider:
    """
    Dependency resolving the storage provider for this request

    Signed-in callers always get the hosted provider scoped to them;
    anonymous callers get the session's selected provider.

    Raises:
        AuthenticationError: If the hosted provider is selected but no user is signed in
        ConfigurationError: If the selected provider is not configured
    """
    kind = session.resolve(authenticated=user is not None)
    return resolve_provider(kind, user)
