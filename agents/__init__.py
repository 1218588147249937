# =============================================================================
# agents/ - AI Helpers
# =============================================================================
# OpenAI-backed features, available on the Pro plan:
# - insights.py: markdown insights on a card's click analytics
# - insights.py: social-media username suggestions for the card editor
#
# Both degrade quietly: failures return a placeholder or an empty list.
# =============================================================================

from agents.insights import (
    INSIGHTS_ERROR_MESSAGE,
    generate_analytics_insights,
    suggest_usernames,
)

__all__ = [
    "INSIGHTS_ERROR_MESSAGE",
    "generate_analytics_insights",
    "suggest_usernames",
]
