"""Supabase client construction (hosted provider and identity adapter)"""
import logging
from typing import Optional

from supabase import Client, create_client

from config.settings import settings
from errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_user_client(access_token: Optional[str] = None) -> Client:
    """
    Client using the anon key, optionally authorized as a signed-in user.

    With an access token, database requests carry the user's JWT so
    row-level security applies to them.

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_ANON_KEY is not set
    """
    if not settings.is_hosted_configured():
        raise ConfigurationError("Hosted backend is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    if access_token:
        client.postgrest.auth(access_token)
    return client


def create_admin_client() -> Client:
    """
    Client using the service-role key (user administration only).

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise ConfigurationError("SUPABASE_SERVICE_ROLE_KEY is not configured")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
