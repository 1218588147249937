# =============================================================================
# core/models/user.py - Account Schemas
# =============================================================================
# - UserTier: the account plan that gates card limits and Pro features
# - Profile: a row of the profiles table (id, email, tier)
# - AuthSession: the opaque session handed out by Supabase Auth
# - User: the signed-in account held by the session store
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserTier(str, Enum):
    """
    Account plan.

    The wire values are the display names stored in profiles.tier.
    """
    FREE = "Free"
    PRO = "Pro"
    SMALL_BUSINESS = "Small Business"
    ENTERPRISE = "Enterprise"


class Profile(BaseModel):
    """A row of the profiles table."""

    id: str
    email: str
    tier: UserTier = UserTier.FREE


class AuthSession(BaseModel):
    """
    Session issued by Supabase Auth.

    The store never looks inside the tokens; it only needs the user id to
    load the profile and the access token to hand back to clients.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None
    access_token: str = ""
    refresh_token: str | None = None


class User(BaseModel):
    """
    The signed-in account.

    Only built once a profile row has been found for the session
    (a session without a profile is treated as signed out).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    tier: UserTier
    session: AuthSession = Field(
        ...,
        description="Opaque session handle the user signed in with"
    )

    @classmethod
    def from_profile(cls, profile: Profile, session: AuthSession) -> "User":
        return cls(id=profile.id, email=profile.email, tier=profile.tier, session=session)
