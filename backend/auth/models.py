from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from models.enums import ProviderKind


class AuthenticatedUser(BaseModel):
    """Caller identity taken from a verified hosted-backend access token"""
    user_id: str  # Token subject (hosted-backend user id)
    email: Optional[str] = None
    access_token: str


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    """Response for sign-in and GET /auth/session"""
    authenticated: bool
    provider: ProviderKind
    user_id: Optional[str] = None
    email: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class PasswordChangeRequest(BaseModel):
    password: str = Field(min_length=6)


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    redirect_to: Optional[str] = None


class InviteRequest(BaseModel):
    email: EmailStr
    redirect_to: Optional[str] = None
