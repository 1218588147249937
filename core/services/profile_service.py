# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Reads and writes rows of the profiles table (id, email, tier).
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient
from core.models.user import Profile, UserTier

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for account profiles."""

    @staticmethod
    def get_profile(user_id: UUID | str) -> Profile | None:
        """
        Fetch a user's profile.

        Returns:
            Profile, or None if the user has no profile row

        Raises:
            SupabaseClientError: If the query fails
        """
        row = SupabaseClient.fetch_profile(user_id)
        if not row:
            return None
        return Profile.model_validate(row)

    @staticmethod
    def create_profile(user_id: UUID | str, email: str, tier: UserTier) -> Profile:
        """
        Insert the profile for a newly signed-up user.

        Raises:
            SupabaseClientError: If the insert fails
        """
        row = SupabaseClient.insert_profile(user_id, email, tier.value)
        logger.info(f"Created profile for user: {user_id} ({tier.value})")
        return Profile.model_validate(row)

    @staticmethod
    def update_tier(user_id: UUID | str, tier: UserTier) -> Profile:
        """
        Change a user's plan.

        Raises:
            SupabaseClientError: If the update fails
        """
        row = SupabaseClient.update_profile(user_id, {"tier": tier.value})
        logger.info(f"Updated tier for user: {user_id} -> {tier.value}")
        return Profile.model_validate(row)
