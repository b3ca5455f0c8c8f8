"""
Error taxonomy shared by providers, routes and the client.

Every error carries an HTTP status code so the REST boundary can render
it as {"error": message} without knowing which backend raised it.
"""

from typing import Optional


class JobTrackerError(Exception):
    """Base exception for job tracker errors."""

    status_code: int = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Args:
            message: Human-readable error message (returned to the caller)
            original_error: The backend exception this wraps, if any
        """
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(JobTrackerError):
    """Malformed id or missing/invalid field. Raised before any storage call."""
    status_code = 400


class AuthenticationError(JobTrackerError):
    """Missing or invalid hosted-backend session."""
    status_code = 401


class PermissionDeniedError(JobTrackerError):
    """Signed in, but not allowed to perform this operation."""
    status_code = 403


class NotFoundError(JobTrackerError):
    """Row is absent, or owned by another identity."""
    status_code = 404


class ProviderSelectionError(JobTrackerError):
    """Requested provider is not allowed in the current session state."""
    status_code = 409


class StorageError(JobTrackerError):
    """Backend failure (connection, constraint violation, remote API error)."""
    status_code = 500


class ConfigurationError(JobTrackerError):
    """A credential or setting required by this operation is missing."""
    status_code = 500


def not_found(kind: str, item_id: int) -> NotFoundError:
    """Build the not-found error used by every provider."""
    return NotFoundError(f"{kind} {item_id} not found")


def ensure_valid_id(value, kind: str = "Job") -> int:
    """
    Validate a storage id before touching storage.

    Accepts ints and digit-only strings; rejects bools, zero and negatives.

    Raises:
        ValidationError: If the value is not a positive integer id
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {kind.lower()} ID")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValidationError(f"Invalid {kind.lower()} ID")
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise ValidationError(f"Invalid {kind.lower()} ID")
    return value
