# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import base64
import binascii
import re
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        card_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        card_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Data URL Utilities
# =============================================================================

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[^,]*)?;base64,(?P<payload>.*)$", re.DOTALL)


def data_url_to_bytes(data_url: str) -> tuple[bytes, str]:
    """
    Decode a base64 data URL into raw bytes and its MIME type.

    Browsers hand image previews over as data URLs
    (``data:image/png;base64,iVBOR...``); storage wants the bytes.

    Returns:
        Tuple of (content bytes, mime type)

    Raises:
        ValueError: If the string is not a base64 data URL
    """
    match = _DATA_URL_RE.match(data_url.strip())
    if not match:
        raise ValueError("Invalid data URL")

    try:
        content = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e

    return content, match.group("mime").lower()


def extension_for_mime(mime_type: str) -> str:
    """Derive a file extension from a MIME type ("image/jpeg" -> "jpeg")."""
    return mime_type.split("/")[-1].split("+")[0]
