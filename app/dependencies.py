# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth import AuthUser, get_current_user
from app.exceptions import ProfileNotFoundError
from core.models.user import AuthSession
from core.store import SessionStore


def new_session_store() -> SessionStore:
    """A fresh, signed-out store backed by the Supabase services."""
    return SessionStore()


def get_session_store(
    user: AuthUser = Depends(get_current_user),
    store: SessionStore = Depends(new_session_store),
) -> SessionStore:
    """
    Session store initialized for the authenticated caller.

    Raises:
        ProfileNotFoundError: If the token's user has no profile row
    """
    session = AuthSession(
        user_id=str(user.id),
        email=user.email,
        access_token=user.access_token,
    )
    if store.initialize(session) is None:
        raise ProfileNotFoundError(str(user.id))
    return store


# Type aliases for dependency injection
StoreDep = Annotated[SessionStore, Depends(get_session_store)]
AnonStoreDep = Annotated[SessionStore, Depends(new_session_store)]
