from jose import JWTError, jwt

from config.settings import settings
from errors import AuthenticationError, ConfigurationError


def verify_access_token(token: str) -> dict:
    """
    Decode and verify a hosted-backend (Supabase) access token

    Args:
        token: JWT issued by the hosted backend's auth service

    Returns:
        dict: Decoded token payload (sub, email, role, exp, ...)

    Raises:
        ConfigurationError: If SUPABASE_JWT_SECRET is not set
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    if not settings.SUPABASE_JWT_SECRET:
        raise ConfigurationError("SUPABASE_JWT_SECRET is not configured")

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError:
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("sub"):
        raise AuthenticationError("Could not validate credentials")
    return payload
