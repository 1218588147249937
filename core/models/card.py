# =============================================================================
# core/models/card.py - Card Schemas
# =============================================================================
# These models define the contract for business cards:
# - CardContact / SocialLink / EnabledFields: nested parts of a card
# - CardFields: everything the owner edits (shared by create and update)
# - CardCreate: input for the setup wizard, with the wizard's defaults
# - CardData: a stored card row, including id, owner and QR link
# - CardLinkState: where a card is in the two-phase create
#
# A card is owned by exactly one user. The QR code URL is derived from the
# card's public URL and so can only be written after the insert assigns an id.
# =============================================================================

import time
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Platforms with a known profile URL; anything else is a freeform link
PREDEFINED_PLATFORMS = [
    "linkedin",
    "twitter",
    "instagram",
    "github",
    "facebook",
    "youtube",
    "tiktok",
]


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class CardLinkState(str, Enum):
    """
    Progress of the two-phase card creation.

    pending -> created -> qr_linked

    - pending: validated locally, not yet inserted
    - created: row inserted, qr_code_url not yet written
    - qr_linked: qr_code_url written; the card is fully shareable

    A stored card left in `created` (the second write failed) is detected by
    its empty qr_code_url and can be repaired by re-running the link step.
    """
    PENDING = "pending"
    CREATED = "created"
    QR_LINKED = "qr_linked"


class CardContact(BaseModel):
    """Contact details; each one is shown only if its toggle is enabled."""

    phone: str = ""
    whatsapp: str = ""
    email: str = ""
    website: str = ""


class SocialLink(BaseModel):
    """
    One entry in the card's ordered social links.

    For predefined platforms `username` is the handle; for any other
    platform it holds the full URL.
    """

    id: str = Field(default_factory=lambda: f"new_{_epoch_ms()}")
    platform: str = "linkedin"
    username: str = ""
    enabled: bool = True


class EnabledFields(BaseModel):
    """Per-field visibility toggles on the public card."""

    phone: bool = True
    whatsapp: bool = True
    email: bool = True
    website: bool = True
    address: bool = True
    gallery: bool = True


class CardFields(BaseModel):
    """
    The owner-editable part of a card.

    `full_name` is the only required field and must not be blank.
    """

    profile_photo: str = ""
    banner_photo: str = ""
    full_name: str = Field(..., description="Name shown on the card (required)")
    business_name: str | None = None
    role: str | None = None
    tagline: str | None = None
    contact: CardContact = Field(default_factory=CardContact)
    socials: list[SocialLink] = Field(default_factory=list)
    address: str | None = None
    gallery: list[str] = Field(default_factory=list)
    enabled_fields: EnabledFields = Field(default_factory=EnabledFields)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        """Reject blank names before anything reaches the database."""
        v = v.strip()
        if not v:
            raise ValueError("full_name is required")
        return v


class CardCreate(CardFields):
    """
    Input for creating a card.

    Defaults mirror the setup wizard: generated placeholder photos and
    every toggle on. The gallery toggle is switched off later for tiers
    without gallery access.

    Example:
        {
            "full_name": "Ada Lovelace",
            "role": "Engineer",
            "contact": {"email": "ada@example.com"}
        }
    """

    profile_photo: str = Field(
        default_factory=lambda: f"https://i.pravatar.cc/150?u=newuser_{_epoch_ms()}"
    )
    banner_photo: str = Field(
        default_factory=lambda: f"https://picsum.photos/seed/newuser_banner_{_epoch_ms()}/800/200"
    )


class CardData(CardFields):
    """A stored card row."""

    id: str
    user_id: str
    qr_code_url: str = ""
    created_at: datetime | None = None

    @property
    def link_state(self) -> CardLinkState:
        """Stored cards are either still waiting for their QR link or done."""
        return CardLinkState.QR_LINKED if self.qr_code_url else CardLinkState.CREATED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CardData":
        """Build from a cards table row, tolerating NULL nested columns."""
        data = dict(row)
        for key, default in (("contact", {}), ("socials", []), ("gallery", []), ("enabled_fields", {})):
            if data.get(key) is None:
                data[key] = default
        if data.get("qr_code_url") is None:
            data["qr_code_url"] = ""
        for key in ("profile_photo", "banner_photo"):
            if data.get(key) is None:
                data[key] = ""
        return cls.model_validate(data)

    def editable_fields(self) -> dict[str, Any]:
        """JSON-ready dict of the owner-editable columns, for update writes."""
        return self.model_dump(
            mode="json",
            exclude={"id", "user_id", "qr_code_url", "created_at"},
        )
