# =============================================================================
# core/vcard.py - vCard Export
# =============================================================================
# Builds the vCard 3.0 contact file offered by the public card's
# "save contact" button. Nothing is stored; the text is generated per request.
# =============================================================================

from core.models.card import CardData

VCARD_MIME_TYPE = "text/vcard"


def _escape(value: str | None) -> str:
    """Escape vCard text values (backslash, comma, semicolon, newline)."""
    if not value:
        return ""
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _single_line(value: str | None) -> str:
    """Drop line breaks from values written unescaped (phone, email, URIs)."""
    if not value:
        return ""
    return value.replace("\r", "").replace("\n", "")


def split_name(full_name: str) -> tuple[str, str]:
    """Split "Ada King Lovelace" into ("Lovelace", "Ada King")."""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[-1], " ".join(parts[:-1])


def build_vcard(card: CardData) -> str:
    """
    Render a card as a vCard 3.0 document.

    Includes name, organisation, title, phone, email, website and the
    profile photo URL. Lines are CRLF-terminated.
    """
    family, given = split_name(card.full_name)
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"N:{_escape(family)};{_escape(given)};;;",
        f"FN:{_escape(card.full_name)}",
        f"ORG:{_escape(card.business_name)}",
        f"TITLE:{_escape(card.role)}",
        f"TEL;TYPE=WORK,VOICE:{_single_line(card.contact.phone)}",
        f"EMAIL:{_single_line(card.contact.email)}",
        f"URL:{_single_line(card.contact.website)}",
    ]
    if card.profile_photo:
        lines.append(f"PHOTO;VALUE=URI;TYPE=JPEG:{_single_line(card.profile_photo)}")
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


def vcard_filename(card: CardData) -> str:
    """Download name, e.g. "Ada_Lovelace.vcf"."""
    return f"{'_'.join(card.full_name.split())}.vcf"
