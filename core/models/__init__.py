# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Tiers, profiles, auth sessions and the signed-in user
# - card.py: Business card schemas and the two-phase create states
# - click.py: Click events and analytics aggregation outputs
#
# These models define the "contract" between API and clients.
# =============================================================================

from .user import (
    AuthSession,
    Profile,
    User,
    UserTier,
)

from .card import (
    PREDEFINED_PLATFORMS,
    CardContact,
    CardCreate,
    CardData,
    CardFields,
    CardLinkState,
    EnabledFields,
    SocialLink,
)

from .click import (
    AnalyticsSummary,
    Click,
    ClickCreate,
    DayCount,
    TimeWindow,
    TypeCount,
)

__all__ = [
    # User
    "AuthSession",
    "Profile",
    "User",
    "UserTier",
    # Card
    "PREDEFINED_PLATFORMS",
    "CardContact",
    "CardCreate",
    "CardData",
    "CardFields",
    "CardLinkState",
    "EnabledFields",
    "SocialLink",
    # Click / Analytics
    "AnalyticsSummary",
    "Click",
    "ClickCreate",
    "DayCount",
    "TimeWindow",
    "TypeCount",
]
