# =============================================================================
# app/routers/cards.py - Card Management Endpoints
# =============================================================================
# CRUD for the signed-in user's cards, plus the share link and the repair
# step for cards whose QR link was never written.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, status
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import StoreDep
from core.links import public_card_url
from core.models.card import CardCreate, CardData, CardFields, CardLinkState

logger = logging.getLogger(__name__)

router = APIRouter()

CardId = Annotated[str, Path(description="Card UUID")]


# =============================================================================
# Response Models
# =============================================================================

class CardListResponse(BaseModel):
    """The user's cards with what their plan still allows."""

    cards: list[CardData]
    capabilities: dict = Field(..., description="Tier capabilities for the current card count")
    unlinked_card_ids: list[str] = Field(
        default_factory=list,
        description="Cards created without a QR link; repair with POST /cards/{id}/qr/repair"
    )


class ShareResponse(BaseModel):
    """Everything needed to share a card."""

    card_id: str
    url: str
    qr_code_url: str
    link_state: CardLinkState

    model_config = {
        "json_schema_extra": {
            "example": {
                "card_id": "550e8400-e29b-41d4-a716-446655440000",
                "url": "https://loopcard.app/#/card/550e8400-e29b-41d4-a716-446655440000",
                "qr_code_url": "https://api.qrserver.com/v1/create-qr-code/?size=150x150&data=...",
                "link_state": "qr_linked",
            }
        }
    }


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=CardListResponse)
async def list_cards(store: StoreDep) -> CardListResponse:
    """List the user's cards, newest first."""
    return CardListResponse(
        cards=store.cards,
        capabilities=store.capabilities.to_dict(),
        unlinked_card_ids=[c.id for c in store.find_unlinked_cards()],
    )


@router.post("", response_model=CardData, status_code=status.HTTP_201_CREATED)
async def create_card(request: CardCreate, store: StoreDep) -> CardData:
    """
    Create a card.

    The card is inserted first and then given its QR code link.

    Raises:
        403: CARD_LIMIT_REACHED when the plan's card limit is used up
        422: If full_name is blank
    """
    card = store.add_card(request)
    logger.info(f"User {store.user.id} created card {card.id}")
    return card


@router.get("/{card_id}", response_model=CardData)
async def get_card(card_id: CardId, store: StoreDep) -> CardData:
    """
    Get one of the user's cards.

    Raises:
        404: If the user owns no such card
    """
    return store.get_owned_card(card_id)


@router.put("/{card_id}", response_model=CardData)
async def update_card(card_id: CardId, request: CardFields, store: StoreDep) -> CardData:
    """
    Replace the editable fields of a card.

    The id, owner and QR link are kept.
    """
    return store.edit_card(card_id, request)


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: CardId, store: StoreDep) -> None:
    """Delete a card. Its clicks are removed by the database."""
    store.delete_card(card_id)


@router.get("/{card_id}/share", response_model=ShareResponse)
async def share_card(card_id: CardId, store: StoreDep) -> ShareResponse:
    """Public link and QR image for a card."""
    card = store.get_owned_card(card_id)
    return ShareResponse(
        card_id=card.id,
        url=public_card_url(settings.APP_ORIGIN, card.id),
        qr_code_url=card.qr_code_url,
        link_state=card.link_state,
    )


@router.post("/{card_id}/qr/repair", response_model=CardData)
async def repair_qr_link(card_id: CardId, store: StoreDep) -> CardData:
    """
    Write the QR link for a card whose second create step failed.

    Cards that already have a QR link are returned unchanged.
    """
    return store.repair_qr_link(card_id)
