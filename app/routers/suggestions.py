# =============================================================================
# app/routers/suggestions.py - Username Suggestion Endpoint
# =============================================================================
# Pro-only helper for the card editor: proposes social-media usernames
# from the card's name, role and business.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel, Field

from agents.insights import suggest_usernames
from app.dependencies import StoreDep
from app.exceptions import FeatureNotAvailableError
from core.policy import AI_UPSELL_HINT

router = APIRouter()


class UsernameSuggestionRequest(BaseModel):
    """Profile fields the suggestions are based on."""

    full_name: str = Field(..., min_length=1)
    role: str | None = None
    business_name: str | None = None
    platform: str = Field(..., min_length=1, description="e.g. linkedin, github")

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Ada Lovelace",
                "role": "Engineer",
                "business_name": "Analytical Engines",
                "platform": "github",
            }
        }
    }


class UsernameSuggestionResponse(BaseModel):
    suggestions: list[str] = Field(default_factory=list, description="Empty when generation failed")


@router.post("/usernames", response_model=UsernameSuggestionResponse)
async def get_username_suggestions(
    request: UsernameSuggestionRequest,
    store: StoreDep,
) -> UsernameSuggestionResponse:
    """
    Suggest usernames for one platform.

    Raises:
        403: FEATURE_NOT_AVAILABLE unless the user is on Pro
    """
    if not store.capabilities.can_use_ai_features:
        raise FeatureNotAvailableError("Username suggestions", store.user.tier.value, hint=AI_UPSELL_HINT)

    return UsernameSuggestionResponse(
        suggestions=suggest_usernames(
            request.full_name,
            request.role,
            request.business_name,
            request.platform,
        )
    )
