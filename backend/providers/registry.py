"""
Provider registry: maps a ProviderKind to a StorageProvider instance.

Mock and relational providers are process-wide singletons. The hosted
provider is built per request because it is scoped to the caller.
"""

import logging
from functools import lru_cache
from typing import Optional

from auth.models import AuthenticatedUser
from db.supabase_client import create_user_client
from errors import AuthenticationError
from models.enums import ProviderKind
from providers.base import StorageProvider
from providers.hosted import HostedProvider
from providers.mock import MockProvider
from providers.relational import RelationalProvider

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_mock_provider() -> MockProvider:
    logger.info("Seeding mock provider with demo data")
    return MockProvider()


@lru_cache(maxsize=1)
def get_relational_provider() -> RelationalProvider:
    return RelationalProvider()


def build_hosted_provider(user: AuthenticatedUser) -> HostedProvider:
    """
    Hosted provider for one signed-in user.

    Raises:
        ConfigurationError: If the hosted backend is not configured
    """
    client = create_user_client(user.access_token)
    return HostedProvider(client, owner_id=user.user_id)


def resolve_provider(kind: ProviderKind, user: Optional[AuthenticatedUser] = None) -> StorageProvider:
    """
    Provider instance for the given kind.

    Raises:
        AuthenticationError: If the hosted provider is requested without a signed-in user
        ConfigurationError: If the provider's backend is not configured
    """
    if kind == ProviderKind.MOCK:
        return get_mock_provider()
    if kind == ProviderKind.RELATIONAL:
        return get_relational_provider()
    if user is None:
        raise AuthenticationError("Sign in to use the hosted backend")
    return build_hosted_provider(user)
