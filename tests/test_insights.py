# =============================================================================
# tests/test_insights.py - AI Insights and Suggestions Tests
# =============================================================================
# This module contains tests for:
# - Prompt construction from a click summary
# - Degrading to a placeholder / empty list when OpenAI fails
# - Parsing username suggestions
#
# Tests mock the OpenAI client to avoid API calls.
# =============================================================================

from unittest.mock import MagicMock, patch

from agents.insights import (
    INSIGHTS_ERROR_MESSAGE,
    MAX_SUGGESTIONS,
    build_insights_prompt,
    generate_analytics_insights,
    parse_suggestions,
    suggest_usernames,
)
from core.models.click import AnalyticsSummary, DayCount, TypeCount


def _summary() -> AnalyticsSummary:
    return AnalyticsSummary(
        window_days=30,
        total_clicks=3,
        by_type=[TypeCount(name="Phone", count=2), TypeCount(name="Email", count=1)],
        by_day=[DayCount(date="2024-06-14", count=2), DayCount(date="2024-06-15", count=1)],
    )


def _completion(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


# =============================================================================
# Insights Tests
# =============================================================================

class TestInsights:
    """Test generate_analytics_insights."""

    def test_prompt_contains_summary(self):
        prompt = build_insights_prompt(_summary(), card_name="Ada Lovelace")

        assert "Ada Lovelace's card" in prompt
        assert "Total clicks over the last 30 days: 3" in prompt
        assert "Phone (2), Email (1)" in prompt
        assert "Busiest day: 2024-06-14 (2 clicks)" in prompt
        assert "Lead Quality Score" in prompt

    @patch("agents.insights.get_openai_client")
    def test_returns_model_text(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("## Overall Performance\nGood.")
        mock_get_client.return_value = client

        result = generate_analytics_insights(_summary(), card_name="Ada")

        assert result.startswith("## Overall Performance")
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0]["role"] == "user"

    @patch("agents.insights.get_openai_client")
    def test_failure_returns_placeholder(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.side_effect = Exception("rate limited")
        mock_get_client.return_value = client

        assert generate_analytics_insights(_summary()) == INSIGHTS_ERROR_MESSAGE

    @patch("agents.insights.get_openai_client")
    def test_empty_reply_returns_placeholder(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(None)
        mock_get_client.return_value = client

        assert generate_analytics_insights(_summary()) == INSIGHTS_ERROR_MESSAGE


# =============================================================================
# Username Suggestion Tests
# =============================================================================

class TestSuggestions:
    """Test parse_suggestions and suggest_usernames."""

    def test_parse_object(self):
        assert parse_suggestions('{"suggestions": ["@ada", " ada_dev "]}') == ["ada", "ada_dev"]

    def test_parse_bare_list(self):
        assert parse_suggestions('["ada", "lovelace"]') == ["ada", "lovelace"]

    def test_parse_truncates(self):
        names = [f"ada{i}" for i in range(10)]
        assert len(parse_suggestions(str(names).replace("'", '"'))) == MAX_SUGGESTIONS

    def test_parse_garbage(self):
        assert parse_suggestions("not json") == []
        assert parse_suggestions('{"suggestions": "ada"}') == []
        assert parse_suggestions('[1, "", "ada"]') == ["ada"]

    @patch("agents.insights.get_openai_client")
    def test_suggest_usernames(self, mock_get_client):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion('{"suggestions": ["adalovelace", "ada.codes"]}')
        mock_get_client.return_value = client

        result = suggest_usernames("Ada Lovelace", "Engineer", None, "github")

        assert result == ["adalovelace", "ada.codes"]
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "github" in kwargs["messages"][1]["content"]

    @patch("agents.insights.get_openai_client")
    def test_suggest_usernames_failure_is_empty(self, mock_get_client):
        mock_get_client.side_effect = Exception("no api key")

        assert suggest_usernames("Ada", None, None, "linkedin") == []
