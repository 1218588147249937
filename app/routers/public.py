# =============================================================================
# app/routers/public.py - Public Card Endpoints
# =============================================================================
# Unauthenticated endpoints behind a shared card link:
# - GET  /{card_id}         The card as visitors see it
# - GET  /{card_id}/vcard   "Save contact" download
# - POST /{card_id}/clicks  Record a visitor action (fire-and-forget)
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Path, Response, status
from pydantic import BaseModel, Field

from app.config import settings
from app.exceptions import CardNotFoundError
from core.links import contact_actions, public_card_url, social_actions
from core.models.card import CardData
from core.models.click import ClickCreate
from core.services.card_service import CardService
from core.services.click_service import ClickService
from core.vcard import VCARD_MIME_TYPE, build_vcard, vcard_filename

logger = logging.getLogger(__name__)

router = APIRouter()

CardId = Annotated[str, Path(description="Card UUID")]

SAVE_CONTACT_CLICK = "save_contact"


# =============================================================================
# Response Models
# =============================================================================

class CardAction(BaseModel):
    """A contact button or social icon: the click type and where it leads."""

    type: str
    href: str
    id: str | None = None


class PublicCardResponse(BaseModel):
    """A card with hidden fields removed."""

    id: str
    url: str
    full_name: str
    business_name: str | None = None
    role: str | None = None
    tagline: str | None = None
    profile_photo: str = ""
    banner_photo: str = ""
    qr_code_url: str = ""
    address: str | None = None
    gallery: list[str] = Field(default_factory=list)
    contact_actions: list[CardAction] = Field(default_factory=list)
    social_actions: list[CardAction] = Field(default_factory=list)


class ClickAccepted(BaseModel):
    accepted: bool = True


# =============================================================================
# Helpers
# =============================================================================

def _load_card(card_id: str) -> CardData:
    card = CardService.get_card(card_id)
    if card is None:
        raise CardNotFoundError(card_id)
    return card


def _to_public(card: CardData) -> PublicCardResponse:
    enabled = card.enabled_fields
    return PublicCardResponse(
        id=card.id,
        url=public_card_url(settings.APP_ORIGIN, card.id),
        full_name=card.full_name,
        business_name=card.business_name,
        role=card.role,
        tagline=card.tagline,
        profile_photo=card.profile_photo,
        banner_photo=card.banner_photo,
        qr_code_url=card.qr_code_url,
        address=card.address if enabled.address else None,
        gallery=card.gallery if enabled.gallery else [],
        contact_actions=[CardAction(**a) for a in contact_actions(card)],
        social_actions=[CardAction(**a) for a in social_actions(card)],
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{card_id}", response_model=PublicCardResponse)
async def get_public_card(card_id: CardId) -> PublicCardResponse:
    """
    The card as a visitor sees it.

    Raises:
        404: If the card doesn't exist (also when the lookup fails)
    """
    return _to_public(_load_card(card_id))


@router.get("/{card_id}/vcard")
async def download_vcard(card_id: CardId, background_tasks: BackgroundTasks) -> Response:
    """
    Download the card as a vCard 3.0 contact file.

    The download is recorded as a `save_contact` click after the response
    is sent.

    Raises:
        404: If the card doesn't exist
    """
    card = _load_card(card_id)
    filename = vcard_filename(card)
    background_tasks.add_task(ClickService.record_click, card_id, SAVE_CONTACT_CLICK, filename)
    return Response(
        content=build_vcard(card),
        media_type=VCARD_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/{card_id}/clicks",
    response_model=ClickAccepted,
    status_code=status.HTTP_202_ACCEPTED,
)
async def record_click(
    card_id: CardId,
    request: ClickCreate,
    background_tasks: BackgroundTasks,
) -> ClickAccepted:
    """
    Record a visitor action on a card.

    Always accepted; the insert runs after the response is sent and
    failures are only logged.
    """
    background_tasks.add_task(
        ClickService.record_click,
        card_id,
        request.type,
        request.target_url,
    )
    return ClickAccepted()
