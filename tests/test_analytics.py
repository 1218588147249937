# =============================================================================
# tests/test_analytics.py - Click Aggregation Tests
# =============================================================================
# This module contains tests for:
# - Window filtering (bounded, unbounded, boundary)
# - Per-type counts (ordering, ties, case folding)
# - Per-day counts (time zones, no empty days)
# - The combined summary
# =============================================================================

from datetime import datetime, timedelta, timezone
import math

import pytest

from core.analytics import counts_by_day, counts_by_type, filter_by_window, summarize_clicks
from core.models.click import Click, TimeWindow


# =============================================================================
# Window Filter Tests
# =============================================================================

class TestFilterByWindow:
    """Test filter_by_window."""

    def test_keeps_only_recent_clicks(self, make_click, now):
        clicks = [make_click("phone", 1), make_click("email", 10), make_click("phone", 40)]

        result = filter_by_window(clicks, 30, now=now)

        assert [c.type for c in result] == ["phone", "email"]

    def test_boundary_is_inclusive(self, make_click, now):
        """A click exactly `days` old is kept; one a second older is not."""
        on_boundary = make_click("phone", 7)
        just_outside = Click(card_id="c", type="email", created_at=now - timedelta(days=7, seconds=1))

        result = filter_by_window([on_boundary, just_outside], 7, now=now)

        assert result == [on_boundary]

    @pytest.mark.parametrize("days", [None, math.inf, TimeWindow.ALL])
    def test_unbounded_window_returns_everything(self, make_click, now, days):
        clicks = [make_click("phone", 1), make_click("email", 400)]

        assert filter_by_window(clicks, days, now=now) == clicks

    def test_accepts_time_window(self, make_click, now):
        clicks = [make_click("phone", 3), make_click("email", 10)]

        assert len(filter_by_window(clicks, TimeWindow.DAYS_7, now=now)) == 1

    def test_result_is_a_subset_in_original_order(self, make_click, now):
        clicks = [make_click("a", 5), make_click("b", 50), make_click("c", 2), make_click("d", 1)]

        result = filter_by_window(clicks, 14, now=now)

        assert result == [clicks[0], clicks[2], clicks[3]]

    def test_naive_timestamps_are_treated_as_utc(self, now):
        naive = Click(card_id="c", type="phone", created_at=(now - timedelta(days=1)).replace(tzinfo=None))

        assert filter_by_window([naive], 7, now=now) == [naive]

    @pytest.mark.parametrize("days", [0, -5])
    def test_non_positive_window_raises(self, make_click, now, days):
        with pytest.raises(ValueError):
            filter_by_window([make_click("phone")], days, now=now)


# =============================================================================
# Per-Type Count Tests
# =============================================================================

class TestCountsByType:
    """Test counts_by_type."""

    def test_counts_sorted_descending(self, make_click):
        clicks = [make_click("phone"), make_click("phone"), make_click("email")]

        result = counts_by_type(clicks)

        assert [(t.name, t.count) for t in result] == [("Phone", 2), ("Email", 1)]

    def test_ties_keep_first_occurrence_order(self, make_click):
        clicks = [make_click("website"), make_click("github"), make_click("email")]

        assert [t.name for t in counts_by_type(clicks)] == ["Website", "Github", "Email"]

    def test_types_are_case_insensitive(self, make_click):
        clicks = [make_click("Phone"), make_click("PHONE"), make_click("phone")]

        result = counts_by_type(clicks)

        assert len(result) == 1
        assert result[0].name == "Phone"
        assert result[0].count == 3

    def test_counts_sum_to_total(self, make_click):
        clicks = [make_click(t) for t in ["phone", "email", "phone", "github", "save_contact"]]

        assert sum(t.count for t in counts_by_type(clicks)) == len(clicks)

    def test_empty(self):
        assert counts_by_type([]) == []


# =============================================================================
# Per-Day Count Tests
# =============================================================================

class TestCountsByDay:
    """Test counts_by_day."""

    def test_days_ascending_without_gaps_filled(self, make_click):
        clicks = [make_click("phone", 0), make_click("email", 5), make_click("phone", 0)]

        result = counts_by_day(clicks)

        assert [(d.date, d.count) for d in result] == [("2024-06-10", 1), ("2024-06-15", 2)]

    def test_days_follow_the_given_time_zone(self):
        """23:30 UTC on the 14th is already the 15th in Berlin."""
        late = Click(
            card_id="c",
            type="phone",
            created_at=datetime(2024, 6, 14, 23, 30, tzinfo=timezone.utc),
        )

        assert counts_by_day([late])[0].date == "2024-06-14"
        assert counts_by_day([late], tz="Europe/Berlin")[0].date == "2024-06-15"

    def test_every_day_has_at_least_one_click(self, make_click):
        clicks = [make_click("phone", d) for d in (0, 3, 3, 9)]

        result = counts_by_day(clicks)

        assert all(d.count >= 1 for d in result)
        assert sum(d.count for d in result) == len(clicks)

    def test_empty(self):
        assert counts_by_day([]) == []


# =============================================================================
# Summary Tests
# =============================================================================

class TestSummarizeClicks:
    """Test summarize_clicks."""

    def test_phone_phone_email_in_thirty_days(self, make_click, now):
        clicks = [make_click("phone", 1), make_click("phone", 2), make_click("email", 3)]

        summary = summarize_clicks(clicks, TimeWindow.DAYS_30, now=now)

        assert summary.window_days == 30
        assert summary.total_clicks == 3
        assert [(t.name, t.count) for t in summary.by_type] == [("Phone", 2), ("Email", 1)]

    def test_all_time_window_has_no_length(self, make_click, now):
        clicks = [make_click("phone", 1), make_click("email", 365)]

        summary = summarize_clicks(clicks, TimeWindow.ALL, now=now)

        assert summary.window_days is None
        assert summary.total_clicks == 2

    def test_figures_agree(self, make_click, now):
        clicks = [make_click(t, d) for t, d in [("phone", 1), ("email", 8), ("github", 20), ("phone", 70)]]

        summary = summarize_clicks(clicks, TimeWindow.DAYS_60, now=now)

        assert summary.total_clicks == 3
        assert sum(t.count for t in summary.by_type) == summary.total_clicks
        assert sum(d.count for d in summary.by_day) == summary.total_clicks

    def test_no_clicks(self, now):
        summary = summarize_clicks([], now=now)

        assert summary.total_clicks == 0
        assert summary.by_type == []
        assert summary.by_day == []
        assert "none recorded" in summary.to_prompt_text()
