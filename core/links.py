# =============================================================================
# core/links.py - Share Links and Card Actions
# =============================================================================
# Builds every URL a card exposes:
# - the public card URL (what the share link and QR code point at)
# - the QR image URL stored on the card
# - the href behind each contact button and social icon
# =============================================================================

from urllib.parse import quote

from core.models.card import CardData

# Profile URL prefixes for the predefined social platforms
PLATFORM_BASE_URLS: dict[str, str] = {
    "linkedin": "https://linkedin.com/in/",
    "twitter": "https://twitter.com/",
    "instagram": "https://instagram.com/",
    "github": "https://github.com/",
    "facebook": "https://facebook.com/",
    "youtube": "https://youtube.com/",
    "tiktok": "https://tiktok.com/@",
}

CONTACT_ACTIONS = ("phone", "whatsapp", "email", "website")

QR_IMAGE_SIZE = "150x150"

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def public_card_url(app_origin: str, card_id: str) -> str:
    """Shareable link: <origin>/#/card/<card-id>."""
    return f"{app_origin.rstrip('/')}/#/card/{card_id}"


def qr_code_url(qr_service_url: str, card_url: str) -> str:
    """Image URL of a QR code encoding the public card URL."""
    data = quote(card_url, safe=_URI_COMPONENT_SAFE)
    return f"{qr_service_url}?size={QR_IMAGE_SIZE}&data={data}"


def social_url(platform: str, username: str) -> tuple[str, str]:
    """
    Resolve a social link to (click type, URL).

    Predefined platforms prepend their profile prefix to the handle. Any
    other platform treats `username` as the link itself, adding https://
    when no scheme is given.
    """
    key = platform.lower()
    base_url = PLATFORM_BASE_URLS.get(key)
    if base_url:
        return key, base_url + username
    url = username if username.startswith("http") else f"https://{username}"
    return key, url


def contact_href(action: str, value: str) -> str:
    """href for a contact button."""
    if action == "phone":
        return f"tel:{value}"
    if action == "whatsapp":
        return f"https://wa.me/{value}"
    if action == "email":
        return f"mailto:{value}"
    return value


def contact_actions(card: CardData) -> list[dict[str, str]]:
    """Contact buttons to show: enabled and non-empty ones, in display order."""
    actions = []
    for action in CONTACT_ACTIONS:
        value = getattr(card.contact, action)
        if value and getattr(card.enabled_fields, action):
            actions.append({"type": action, "href": contact_href(action, value)})
    return actions


def social_actions(card: CardData) -> list[dict[str, str]]:
    """Social icons to show: enabled links with a username, in card order."""
    actions = []
    for link in card.socials:
        if not (link.enabled and link.username):
            continue
        click_type, url = social_url(link.platform, link.username)
        actions.append({"id": link.id, "type": click_type, "href": url})
    return actions
