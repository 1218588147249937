# =============================================================================
# core/services/auth_service.py - Supabase Auth Operations
# =============================================================================
# Password sign-up, sign-in and sign-out against Supabase Auth.
# Sign-up also writes the profile row, since Auth does not create one.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.user import AuthSession, UserTier
from core.services.profile_service import ProfileService
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def to_auth_session(session: Any, user: Any = None) -> AuthSession | None:
    """
    Convert a Supabase session (and optional user) into an AuthSession.

    Returns None when there is neither a session nor a user.
    """
    if session is None and user is None:
        return None
    user = user or session.user
    return AuthSession(
        user_id=str(user.id),
        email=getattr(user, "email", None),
        access_token=getattr(session, "access_token", "") or "",
        refresh_token=getattr(session, "refresh_token", None),
    )


class AuthService:
    """Service for account authentication."""

    @staticmethod
    def sign_up(email: str, password: str, tier: UserTier) -> AuthSession:
        """
        Register a new account and create its profile.

        The returned session has an empty access token when the project
        requires email confirmation before the first sign-in.

        Raises:
            AuthenticationError: If Supabase Auth rejects the sign-up
            SupabaseClientError: If the profile insert fails
        """
        client = SupabaseClient.get_auth_client()

        try:
            response = client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            logger.warning(f"Sign-up rejected for {email}: {e}")
            raise AuthenticationError(str(e))

        if response.user is None:
            raise AuthenticationError("sign-up returned no user")

        ProfileService.create_profile(response.user.id, email, tier)
        logger.info(f"Signed up user: {response.user.id}")
        return to_auth_session(response.session, response.user)

    @staticmethod
    def sign_in(email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        client = SupabaseClient.get_auth_client()

        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning(f"Sign-in rejected for {email}: {e}")
            raise AuthenticationError(str(e))

        if response.session is None:
            raise AuthenticationError("sign-in returned no session")

        return to_auth_session(response.session, response.user)

    @staticmethod
    def sign_out(session: AuthSession) -> None:
        """
        Revoke the session's refresh tokens.

        Raises:
            AuthenticationError: If Supabase Auth rejects the sign-out
        """
        if not session.access_token:
            return

        client = SupabaseClient.get_client()

        try:
            client.auth.admin.sign_out(session.access_token)
            logger.info(f"Signed out user: {session.user_id}")
        except Exception as e:
            logger.warning(f"Sign-out failed for {session.user_id}: {e}")
            raise AuthenticationError(str(e))

    @staticmethod
    def on_auth_state_change(callback) -> Any:
        """
        Subscribe to the auth client's state changes.

        Returns:
            The subscription; call .unsubscribe() to stop listening
        """
        client = SupabaseClient.get_auth_client()
        return client.auth.on_auth_state_change(callback)
