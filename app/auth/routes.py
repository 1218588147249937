# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for account operations:
# - POST /signup       Create an account and its profile
# - POST /login        Password sign-in
# - POST /logout       Revoke the caller's session
# - GET  /me           Profile, plan and capabilities
# - GET  /verify       Check a stored token
# - PATCH /me/tier     Switch plan
# =============================================================================

import logging

from fastapi import APIRouter, Depends, status

from app.auth.dependencies import get_current_user
from app.auth.models import (
    AuthUser,
    Credentials,
    SessionResponse,
    SignUpRequest,
    TierUpdateRequest,
    UserResponse,
)
from app.dependencies import AnonStoreDep, StoreDep
from app.exceptions import ProfileNotFoundError
from core.store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_response(store: SessionStore) -> UserResponse:
    user = store.user
    return UserResponse(
        id=user.id,
        email=user.email,
        tier=user.tier,
        capabilities=store.capabilities.to_dict(),
    )


@router.post(
    "/signup",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(request: SignUpRequest, store: AnonStoreDep) -> SessionResponse:
    """
    Create an account with a starting plan.

    When the project requires email confirmation no tokens are issued and
    `confirmation_required` is true.

    Raises:
        401: If Supabase Auth rejects the sign-up
    """
    session = store.sign_up(request.email, request.password, request.tier)
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        confirmation_required=not session.access_token,
    )


@router.post("/login", response_model=SessionResponse)
async def login(request: Credentials, store: AnonStoreDep) -> SessionResponse:
    """
    Sign in with email and password.

    Raises:
        401: If the credentials are rejected or the account has no profile
    """
    user = store.sign_in(request.email, request.password)
    if user is None:
        raise ProfileNotFoundError(request.email)

    return SessionResponse(
        user_id=user.id,
        email=user.email,
        access_token=user.session.access_token,
        refresh_token=user.session.refresh_token,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(store: StoreDep) -> None:
    """Revoke the caller's session."""
    store.sign_out()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(store: StoreDep) -> UserResponse:
    """
    Get the current user's profile, plan and what the plan allows.

    Raises:
        401: If not authenticated or the profile is missing
    """
    return _user_response(store)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Returns:
        dict: Confirmation with user_id

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }


@router.patch("/me/tier", response_model=UserResponse)
async def change_tier(request: TierUpdateRequest, store: StoreDep) -> UserResponse:
    """Move the current user to another plan."""
    store.change_tier(request.tier)
    logger.info(f"User {store.user.id} switched to {request.tier.value}")
    return _user_response(store)
