# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Uploads card images (profile photo, banner, gallery) and returns their
# public URLs. Objects are stored as <user-id>/<epoch-ms>.<ext>.
# =============================================================================

import logging
import time
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import data_url_to_bytes, extension_for_mime
from app.config import settings
from app.exceptions import InvalidAssetError, StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """Service for card image uploads."""

    @staticmethod
    def build_asset_path(user_id: UUID | str, content_type: str) -> str:
        """Storage path for a new asset: <user-id>/<epoch-ms>.<ext>."""
        return f"{user_id}/{int(time.time() * 1000)}.{extension_for_mime(content_type)}"

    @staticmethod
    def validate_image(content: bytes, content_type: str) -> None:
        """
        Check type and size before anything is uploaded.

        Raises:
            InvalidAssetError: If the image is empty, too large or not allowed
        """
        allowed = settings.allowed_image_types_list
        if content_type.lower() not in allowed:
            raise InvalidAssetError(f"unsupported type {content_type}", allowed=allowed)
        if not content:
            raise InvalidAssetError("file is empty")
        if len(content) > settings.max_upload_size_bytes:
            raise InvalidAssetError(
                f"{len(content) / (1024 * 1024):.1f}MB exceeds {settings.MAX_UPLOAD_SIZE_MB}MB"
            )

    @staticmethod
    def upload_image(user_id: UUID | str, content: bytes, content_type: str) -> str:
        """
        Upload an image and return its public URL.

        Raises:
            InvalidAssetError: If validation fails
            StorageUploadError: If the upload fails
        """
        StorageService.validate_image(content, content_type)
        path = StorageService.build_asset_path(user_id, content_type)

        try:
            SupabaseClient.upload_object(path, content, content_type)
            return SupabaseClient.get_public_url(path)
        except SupabaseClientError as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(e.message)

    @staticmethod
    def upload_data_url(user_id: UUID | str, data_url: str) -> str:
        """
        Upload an image given as a base64 data URL.

        Raises:
            InvalidAssetError: If the data URL can't be decoded or validated
            StorageUploadError: If the upload fails
        """
        try:
            content, content_type = data_url_to_bytes(data_url)
        except ValueError as e:
            raise InvalidAssetError(str(e))
        return StorageService.upload_image(user_id, content, content_type)
