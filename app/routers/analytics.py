# =============================================================================
# app/routers/analytics.py - Card Analytics Endpoints
# =============================================================================
# Click analytics for one of the user's cards:
# - every plan sees the total click count for the window
# - Pro additionally sees clicks per action type and per day, and can
#   request AI-generated insights on them
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from agents.insights import generate_analytics_insights
from app.config import settings
from app.dependencies import StoreDep
from app.exceptions import FeatureNotAvailableError
from core.analytics import summarize_clicks
from core.models.click import AnalyticsSummary, DayCount, TimeWindow, TypeCount
from core.policy import AI_UPSELL_HINT, ANALYTICS_UPSELL_HINT
from core.services.click_service import ClickService

logger = logging.getLogger(__name__)

router = APIRouter()

CardId = Annotated[str, Path(description="Card UUID")]


# =============================================================================
# Request/Response Models
# =============================================================================

class AnalyticsResponse(BaseModel):
    """Analytics for one card and window."""

    card_id: str
    window_days: int | None = Field(None, description="Window length; null means All Time")
    total_clicks: int
    advanced: bool = Field(..., description="Whether the per-type and per-day series are included")
    by_type: list[TypeCount] = Field(default_factory=list)
    by_day: list[DayCount] = Field(default_factory=list)
    upsell_hint: str | None = None


class InsightsRequest(BaseModel):
    """Which window to analyze."""

    window: TimeWindow = TimeWindow.DAYS_30


class InsightsResponse(BaseModel):
    card_id: str
    window_days: int | None = None
    insights: str = Field(..., description="Markdown analysis")


# =============================================================================
# Helpers
# =============================================================================

def _summarize(card_id: str, window: TimeWindow) -> AnalyticsSummary:
    """Fetch a card's clicks and aggregate them in the display time zone."""
    clicks = ClickService.list_clicks(card_id)
    return summarize_clicks(clicks, window, tz=settings.DISPLAY_TIMEZONE)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{card_id}/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    card_id: CardId,
    store: StoreDep,
    window: Annotated[TimeWindow, Query(description="Trailing window in days, or 'all'")] = TimeWindow.DAYS_30,
) -> AnalyticsResponse:
    """
    Click analytics for a card.

    If the clicks can't be fetched the card shows zero clicks.

    Raises:
        404: If the user owns no such card
    """
    store.get_owned_card(card_id)
    summary = _summarize(card_id, window)

    if not store.capabilities.can_view_advanced_analytics:
        return AnalyticsResponse(
            card_id=card_id,
            window_days=summary.window_days,
            total_clicks=summary.total_clicks,
            advanced=False,
            upsell_hint=ANALYTICS_UPSELL_HINT,
        )

    return AnalyticsResponse(
        card_id=card_id,
        window_days=summary.window_days,
        total_clicks=summary.total_clicks,
        advanced=True,
        by_type=summary.by_type,
        by_day=summary.by_day,
    )


@router.post("/{card_id}/analytics/insights", response_model=InsightsResponse)
async def get_insights(
    card_id: CardId,
    request: InsightsRequest,
    store: StoreDep,
) -> InsightsResponse:
    """
    AI-generated insights for a card's clicks.

    If generation fails, `insights` holds a short error message instead.

    Raises:
        403: FEATURE_NOT_AVAILABLE unless the user is on Pro
        404: If the user owns no such card
    """
    user = store.user
    if not store.capabilities.can_use_ai_features:
        raise FeatureNotAvailableError("AI insights", user.tier.value, hint=AI_UPSELL_HINT)

    card = store.get_owned_card(card_id)
    summary = _summarize(card_id, request.window)

    logger.info(f"Generating insights for card {card_id} ({summary.total_clicks} clicks)")
    return InsightsResponse(
        card_id=card_id,
        window_days=summary.window_days,
        insights=generate_analytics_insights(summary, card_name=card.full_name),
    )
