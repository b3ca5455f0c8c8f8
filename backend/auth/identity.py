"""
Identity adapter for the hosted backend's auth service (Supabase Auth).

Thin wrapper: sign-in, sign-out, password change/reset and invites. Auth
service failures are translated into the application's error taxonomy.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from supabase import AuthError, Client

from db.supabase_client import create_admin_client, create_user_client
from errors import AuthenticationError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class IdentitySession:
    """Tokens and user returned by a successful sign-in"""
    user_id: str
    email: Optional[str]
    access_token: str
    refresh_token: Optional[str]
    expires_in: Optional[int]


class IdentityService:
    """Auth operations against the hosted backend"""

    def __init__(
        self,
        client_factory: Callable[[], Client] = create_user_client,
        admin_client_factory: Callable[[], Client] = create_admin_client,
    ):
        """
        Args:
            client_factory: Builds an anon-key client (sign-in, sign-out, reset)
            admin_client_factory: Builds a service-role client (password change, invites)
        """
        self._client_factory = client_factory
        self._admin_client_factory = admin_client_factory

    def sign_in(self, email: str, password: str) -> IdentitySession:
        """
        Raises:
            AuthenticationError: If the credentials are rejected
            StorageError: If the auth service cannot be reached
        """
        client = self._client_factory()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.warning(f"Sign-in rejected for {email}: {e}")
            raise AuthenticationError("Invalid email or password", original_error=e)
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable during sign-in: {e}")
            raise StorageError("Failed to reach the auth service", original_error=e)

        session = response.session
        if session is None or response.user is None:
            raise AuthenticationError("Invalid email or password")

        logger.info(f"Signed in user {response.user.id}")
        return IdentitySession(
            user_id=response.user.id,
            email=response.user.email,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
        )

    def sign_out(self, access_token: str) -> None:
        """Revoke the caller's refresh tokens"""
        client = self._client_factory()
        self._call("sign out", lambda: client.auth.admin.sign_out(access_token))

    def update_password(self, user_id: str, password: str) -> None:
        """
        Raises:
            ConfigurationError: If the service-role key is not configured
        """
        admin = self._admin_client_factory()
        self._call(
            "update password",
            lambda: admin.auth.admin.update_user_by_id(user_id, {"password": password}),
        )
        logger.info(f"Password updated for user {user_id}")

    def reset_password(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send a password-reset email"""
        client = self._client_factory()
        options = {"redirect_to": redirect_to} if redirect_to else {}
        self._call("send password reset", lambda: client.auth.reset_password_for_email(email, options))

    def invite(self, email: str, redirect_to: Optional[str] = None) -> None:
        """
        Invite a new user by email

        Raises:
            ConfigurationError: If the service-role key is not configured
        """
        admin = self._admin_client_factory()
        options = {"redirect_to": redirect_to} if redirect_to else {}
        self._call("invite user", lambda: admin.auth.admin.invite_user_by_email(email, options))
        logger.info(f"Invited {email}")

    def _call(self, action: str, operation: Callable):
        try:
            return operation()
        except AuthError as e:
            logger.warning(f"Auth service rejected {action}: {e}")
            raise AuthenticationError(f"Failed to {action}: {e.message}", original_error=e)
        except httpx.HTTPError as e:
            logger.error(f"Auth service unreachable during {action}: {e}")
            raise StorageError(f"Failed to {action}", original_error=e)


def get_identity_service() -> IdentityService:
    """FastAPI dependency (overridden in tests)"""
    return IdentityService()
