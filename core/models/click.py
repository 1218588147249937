# =============================================================================
# core/models/click.py - Click & Analytics Schemas
# =============================================================================
# - Click: an append-only visitor event on a public card
# - ClickCreate: what the public card view posts when a visitor acts
# - TimeWindow: the selectable trailing windows of the analytics view
# - TypeCount / DayCount: aggregation outputs for the charts
# - AnalyticsSummary: everything the Pro analytics view renders
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Click(BaseModel):
    """
    A recorded visitor interaction.

    `type` is a contact action ("phone", "whatsapp", "email", "website"),
    a social platform name, or "save_contact".
    """

    id: str | None = None
    card_id: str
    type: str
    target_url: str = ""
    created_at: datetime


class ClickCreate(BaseModel):
    """Body of POST /public/cards/{id}/clicks."""

    type: str = Field(..., min_length=1, max_length=64, description="Action the visitor triggered")
    target_url: str = Field(default="", max_length=2048, description="Link the action opened")


class TimeWindow(str, Enum):
    """
    Trailing windows offered by the analytics view.

    ALL is the unbounded "All Time" window.
    """
    DAYS_7 = "7"
    DAYS_14 = "14"
    DAYS_30 = "30"
    DAYS_60 = "60"
    DAYS_90 = "90"
    ALL = "all"

    @property
    def days(self) -> int | None:
        """Window length in days, or None for All Time."""
        return None if self is TimeWindow.ALL else int(self.value)


class TypeCount(BaseModel):
    """Clicks for one action type."""

    name: str
    count: int = Field(..., ge=1)


class DayCount(BaseModel):
    """Clicks on one calendar day (YYYY-MM-DD)."""

    date: str
    count: int = Field(..., ge=1)


class AnalyticsSummary(BaseModel):
    """Aggregated clicks for one window."""

    window_days: int | None = Field(
        default=None,
        description="Window length in days; null means All Time"
    )
    total_clicks: int = 0
    by_type: list[TypeCount] = Field(default_factory=list)
    by_day: list[DayCount] = Field(default_factory=list)

    def to_prompt_text(self) -> str:
        """Render the summary as plain text for the insights prompt."""
        window = "all time" if self.window_days is None else f"the last {self.window_days} days"
        lines = [f"- Total clicks over {window}: {self.total_clicks}"]

        if self.by_type:
            breakdown = ", ".join(f"{t.name} ({t.count})" for t in self.by_type)
            lines.append(f"- Clicks by action: {breakdown}")
        else:
            lines.append("- Clicks by action: none recorded")

        if self.by_day:
            busiest = max(self.by_day, key=lambda d: d.count)
            lines.append(f"- Active days: {len(self.by_day)}")
            lines.append(f"- Busiest day: {busiest.date} ({busiest.count} clicks)")

        return "\n".join(lines)
