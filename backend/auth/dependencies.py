from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.models import AuthenticatedUser
from auth.utils import verify_access_token

# Anonymous requests are allowed; they use the mock or relational provider
security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthenticatedUser]:
    """
    Dependency returning the signed-in user, or None for anonymous requests

    A bearer token that is present but invalid is an error (401), not an
    anonymous request.

    Raises:
        AuthenticationError: If the token is invalid or expired
    """
    if credentials is None:
        return None

    token = credentials.credentials
    payload = verify_access_token(token)
    return AuthenticatedUser(
        user_id=payload["sub"],
        email=payload.get("email"),
        access_token=token,
    )


async def get_current_user(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> AuthenticatedUser:
    """
    Dependency requiring a signed-in user

    Usage in route:
        @router.post("/password")
        async def change_password(current_user: AuthenticatedUser = Depends(get_current_user)):
            ...

    Raises:
        HTTPException: If no bearer token was sent
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
