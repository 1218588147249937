# =============================================================================
# core/services/click_service.py - Click Tracking
# =============================================================================
# Records visitor clicks on public cards and reads them back for analytics.
# Neither operation ever raises: a visitor must not see an error because
# telemetry failed, and the analytics view shows "no data" when the fetch
# fails.
# =============================================================================

import logging
from uuid import UUID

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from core.models.click import Click

logger = logging.getLogger(__name__)


class ClickService:
    """Service for click events."""

    @staticmethod
    def record_click(card_id: UUID | str, click_type: str, target_url: str) -> None:
        """
        Record one click. At most once: no retry, no de-duplication.

        Failures are logged and dropped.
        """
        try:
            SupabaseClient.insert_click(card_id, click_type, target_url)
            logger.debug(f"Recorded {click_type} click on card {card_id}")
        except Exception as e:
            logger.error(f"Error tracking click on card {card_id}: {e}")

    @staticmethod
    def list_clicks(card_id: UUID | str) -> list[Click]:
        """
        All clicks for a card, newest first.

        Returns an empty list if the fetch fails. Malformed rows are skipped.
        """
        try:
            rows = SupabaseClient.fetch_clicks(card_id)
        except Exception as e:
            logger.error(f"Error fetching clicks for card {card_id}: {e}")
            return []

        clicks = []
        for row in rows:
            try:
                clicks.append(Click.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed click row {row.get('id')}: {e}")
        return clicks
