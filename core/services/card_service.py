# =============================================================================
# core/services/card_service.py - Card Business Logic
# =============================================================================
# Handles card CRUD operations and the two-phase create:
#   1. insert the row with an empty qr_code_url (pending -> created)
#   2. derive the QR URL from the new id and write it (created -> qr_linked)
# Supabase exposes no client-side transactions, so a failure between the
# two writes leaves a card in `created`; find_unlinked_cards() and
# link_qr_code() detect and repair that.
# =============================================================================

import logging
from uuid import UUID

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient, SupabaseClientError
from core.links import public_card_url, qr_code_url
from core.models.card import CardCreate, CardData, CardLinkState
from app.config import settings
from app.exceptions import CardNotFoundError

logger = logging.getLogger(__name__)


class CardService:
    """
    Service for card management operations.

    Provides a clean interface between the session store and the database.
    Write methods raise on failure so callers can leave their state intact.
    """

    @staticmethod
    def list_cards(user_id: UUID | str) -> list[CardData]:
        """
        List a user's cards, newest first. Malformed rows are skipped.

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = SupabaseClient.fetch_cards_for_user(user_id)

        cards = []
        for row in rows:
            try:
                cards.append(CardData.from_row(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed card row {row.get('id')}: {e}")
        return cards

    @staticmethod
    def get_card(card_id: UUID | str) -> CardData | None:
        """
        Fetch a card for display.

        Returns None when the card doesn't exist, when the fetch fails and
        when the stored row is malformed, so viewers get a "not found" page
        rather than an error.
        """
        try:
            row = SupabaseClient.fetch_card(card_id)
        except SupabaseClientError as e:
            logger.error(f"Error fetching card by ID {card_id}: {e}")
            return None

        if not row:
            return None

        try:
            return CardData.from_row(row)
        except ValidationError as e:
            logger.error(f"Malformed card row {card_id}: {e}")
            return None

    @staticmethod
    def get_owned_card(card_id: UUID | str, user_id: UUID | str) -> CardData:
        """
        Fetch a card and verify the caller owns it.

        Raises:
            CardNotFoundError: If the card doesn't exist or belongs to someone else
        """
        card = CardService.get_card(card_id)

        # Don't reveal that another user's card exists
        if card is None or card.user_id != str(user_id):
            raise CardNotFoundError(str(card_id))
        return card

    @staticmethod
    def insert_card(user_id: UUID | str, card: CardCreate) -> CardData:
        """
        Phase one: insert the card with an empty QR URL.

        Raises:
            SupabaseClientError: If the insert fails
        """
        data = card.model_dump(mode="json")
        data["user_id"] = str(user_id)
        data["qr_code_url"] = ""

        row = SupabaseClient.insert_card(data)
        created = CardData.from_row(row)
        logger.info(f"Card {created.id}: {CardLinkState.PENDING.value} -> {created.link_state.value}")
        return created

    @staticmethod
    def link_qr_code(card: CardData) -> CardData:
        """
        Phase two: write the QR URL derived from the card's public URL.

        Also used to repair cards stuck in `created`.

        Raises:
            SupabaseClientError: If the update fails
        """
        card_url = public_card_url(settings.APP_ORIGIN, card.id)
        row = SupabaseClient.update_card(card.id, {"qr_code_url": qr_code_url(settings.QR_SERVICE_URL, card_url)})
        linked = CardData.from_row(row)
        logger.info(f"Card {linked.id}: {card.link_state.value} -> {linked.link_state.value}")
        return linked

    @staticmethod
    def create_card(user_id: UUID | str, card: CardCreate) -> CardData:
        """
        Create a card and link its QR code.

        Raises:
            SupabaseClientError: If either write fails. When the second one
                fails the card exists without a QR URL and the error carries
                its id in details["card_id"].
        """
        created = CardService.insert_card(user_id, card)

        try:
            return CardService.link_qr_code(created)
        except SupabaseClientError as e:
            logger.error(f"Card {created.id} left in {CardLinkState.CREATED.value}: {e}")
            e.details.setdefault("card_id", created.id)
            raise

    @staticmethod
    def update_card(card: CardData) -> CardData:
        """
        Save the owner-editable fields of a card.

        Raises:
            SupabaseClientError: If the update fails
        """
        row = SupabaseClient.update_card(card.id, card.editable_fields())
        logger.info(f"Updated card: {card.id}")
        return CardData.from_row(row)

    @staticmethod
    def delete_card(card_id: UUID | str) -> None:
        """
        Delete a card.

        Raises:
            SupabaseClientError: If the delete fails
        """
        SupabaseClient.delete_card(card_id)
        logger.info(f"Deleted card: {card_id}")

    @staticmethod
    def find_unlinked_cards(cards: list[CardData]) -> list[CardData]:
        """Cards whose second create phase never completed."""
        return [c for c in cards if c.link_state == CardLinkState.CREATED]
