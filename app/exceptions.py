# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where possible, a suggestion
# telling the caller how to fix the problem.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class LoopCardException(Exception):
    """
    Base exception for the LoopCard API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "LOOPCARD_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Account Exceptions
# =============================================================================

class AuthenticationError(LoopCardException):
    """Raised when sign-up, sign-in or sign-out is rejected by the auth service."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Authentication failed: {error}",
            code="AUTHENTICATION_FAILED",
            status_code=401,
            suggestion="Check the email and password and try again",
        )


class ProfileNotFoundError(LoopCardException):
    """Raised when an authenticated user has no profile row."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"Profile not found for user: {user_id}",
            code="PROFILE_NOT_FOUND",
            status_code=401,
            suggestion="Sign up again or contact support to restore the account profile",
            details={"user_id": user_id},
        )


# =============================================================================
# Card Exceptions
# =============================================================================

class CardNotFoundError(LoopCardException):
    """Raised when a card ID doesn't exist or isn't owned by the caller."""

    def __init__(self, card_id: str):
        super().__init__(
            message=f"Card not found: {card_id}",
            code="CARD_NOT_FOUND",
            status_code=404,
            suggestion="Check that the card_id is correct",
            details={"card_id": card_id},
        )


class CardLimitReachedError(LoopCardException):
    """Raised when creating a card would exceed the tier's card limit."""

    def __init__(self, tier: str, limit: int):
        super().__init__(
            message=f"The {tier} plan allows at most {limit} cards",
            code="CARD_LIMIT_REACHED",
            status_code=403,
            suggestion="Delete an existing card or upgrade your plan",
            details={"tier": tier, "limit": limit},
        )


class FeatureNotAvailableError(LoopCardException):
    """Raised when the caller's tier does not include a feature."""

    def __init__(self, feature: str, tier: str, hint: str | None = None):
        super().__init__(
            message=f"{feature} is not available on the {tier} plan",
            code="FEATURE_NOT_AVAILABLE",
            status_code=403,
            suggestion=hint or "Upgrade to Pro to unlock this feature",
            details={"feature": feature, "tier": tier},
        )


# =============================================================================
# Asset Exceptions
# =============================================================================

class InvalidAssetError(LoopCardException):
    """Raised when an uploaded image is malformed, too large or of a disallowed type."""

    def __init__(self, reason: str, allowed: list[str] | None = None):
        super().__init__(
            message=f"Invalid image: {reason}",
            code="INVALID_ASSET",
            status_code=400,
            suggestion=(
                f"Upload one of: {', '.join(allowed)}" if allowed
                else "Upload a valid image file"
            ),
            details={"reason": reason},
        )


class StorageUploadError(LoopCardException):
    """Raised when image upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def loopcard_exception_handler(
    request: Request,
    exc: LoopCardException
) -> JSONResponse:
    """
    Convert LoopCardException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle Pydantic validation errors raised outside request parsing."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
