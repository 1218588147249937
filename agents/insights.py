# =============================================================================
# agents/insights.py - AI Insights and Username Suggestions
# =============================================================================
# Sends click summaries or profile fields to OpenAI and returns:
# - free-text markdown insights for the Pro analytics view
# - a list of social-media username suggestions
# Both are best effort: on any failure the caller gets a placeholder message
# or an empty list, never an exception.
# =============================================================================

import json
import logging

from core.models.click import AnalyticsSummary

logger = logging.getLogger(__name__)

INSIGHTS_ERROR_MESSAGE = "There was an error generating AI insights. Please try again later."
MAX_SUGGESTIONS = 5

# Lazy-loaded OpenAI client
_client = None


def get_openai_client():
    """Get or create OpenAI client (lazy initialization)."""
    global _client
    if _client is None:
        from openai import OpenAI
        from app.config import settings
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def build_insights_prompt(summary: AnalyticsSummary, card_name: str | None = None) -> str:
    """Embed the click summary in the insights request."""
    subject = f" for {card_name}'s card" if card_name else ""
    return f"""Analyze the following digital business card analytics{subject} and provide actionable insights.
The user is a professional looking to improve their networking effectiveness.
Provide the analysis in markdown format with clear headings.

Data (visitor clicks on the card's contact and social buttons):
{summary.to_prompt_text()}

Analysis Required:
1.  **Overall Performance:** Summarize how much visitors engage with the card.
2.  **Engagement Insights:** Which actions do visitors prefer, and what does that suggest?
3.  **Activity Pattern:** What do the active and busiest days suggest about when the card gets shared?
4.  **Lead Quality Score:** Give a score from 1-100 and justify it. A high score means visitors act on the card.
5.  **Actionable Recommendations:** Provide 3 concrete recommendations to improve the card's effectiveness."""


def generate_analytics_insights(summary: AnalyticsSummary, card_name: str | None = None) -> str:
    """
    Generate markdown insights for a card's click summary.

    Args:
        summary: Aggregated clicks for the selected window
        card_name: Name on the card, for a more personal prompt

    Returns:
        Markdown text, or INSIGHTS_ERROR_MESSAGE if the request fails
    """
    from app.config import settings

    try:
        client = get_openai_client()
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[{"role": "user", "content": build_insights_prompt(summary, card_name)}],
            temperature=settings.INSIGHTS_TEMPERATURE,
            max_tokens=900,
        )
        content = response.choices[0].message.content
        return content or INSIGHTS_ERROR_MESSAGE
    except Exception as e:
        logger.error(f"Error generating insights from OpenAI: {e}")
        return INSIGHTS_ERROR_MESSAGE


def parse_suggestions(text: str) -> list[str]:
    """
    Parse the model's reply into a list of usernames.

    Accepts a bare JSON array or an object with a "suggestions" array.
    Anything else yields an empty list.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        logger.warning(f"Failed to parse username suggestions: {text!r}")
        return []

    if isinstance(data, dict):
        data = data.get("suggestions", [])
    if not isinstance(data, list):
        return []

    suggestions = [s.strip().lstrip("@") for s in data if isinstance(s, str) and s.strip()]
    return suggestions[:MAX_SUGGESTIONS]


def suggest_usernames(
    full_name: str,
    role: str | None,
    business_name: str | None,
    platform: str,
) -> list[str]:
    """
    Suggest usernames for a social platform from the card's profile fields.

    Returns:
        Up to MAX_SUGGESTIONS usernames, or [] on any failure
    """
    from app.config import settings

    system_prompt = (
        "You suggest professional social media usernames. "
        'Reply with JSON only, in the form {"suggestions": ["name1", "name2"]}.'
    )
    user_prompt = f"""Suggest {MAX_SUGGESTIONS} available-looking usernames on {platform} for this person.

Full name: {full_name}
Role: {role or "not given"}
Business: {business_name or "not given"}

Usernames must be short, memorable, use only letters, numbers, dots or underscores, and have no @ prefix."""

    try:
        client = get_openai_client()
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.8,
            max_tokens=200,
        )
        return parse_suggestions(response.choices[0].message.content)
    except Exception as e:
        logger.error(f"Error getting username suggestions from OpenAI: {e}")
        return []
