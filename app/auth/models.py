# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from core.models.user import UserTier


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None
    access_token: str = ""


class Credentials(BaseModel):
    """Email and password for sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=6)


class SignUpRequest(Credentials):
    """Sign-up also picks the starting plan."""

    tier: UserTier = UserTier.FREE


class TierUpdateRequest(BaseModel):
    tier: UserTier


class SessionResponse(BaseModel):
    """Tokens handed back after sign-up or sign-in."""

    user_id: str
    email: str | None = None
    access_token: str = ""
    refresh_token: str | None = None
    confirmation_required: bool = False


class UserResponse(BaseModel):
    """The signed-in account with its plan and capabilities."""

    id: str
    email: str
    tier: UserTier
    capabilities: dict
