# =============================================================================
# app/routers/assets.py - Image Upload Endpoint
# =============================================================================
# Uploads profile, banner and gallery images to Supabase Storage and returns
# the public URL to store on the card.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, UploadFile, status
from pydantic import BaseModel

from app.dependencies import StoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


class AssetResponse(BaseModel):
    url: str


@router.post("", response_model=AssetResponse, status_code=status.HTTP_201_CREATED)
async def upload_asset(
    file: Annotated[UploadFile, File(description="Image file (jpeg, png, webp or gif)")],
    store: StoreDep,
) -> AssetResponse:
    """
    Upload an image for use on a card.

    Raises:
        400: INVALID_ASSET if the file is empty, too large or not an allowed image type
        500: STORAGE_UPLOAD_ERROR if the upload fails
    """
    content = await file.read()
    url = store.upload_asset(content, file.content_type)
    logger.info(f"User {store.user.id} uploaded {file.filename} ({len(content)} bytes)")
    return AssetResponse(url=url)
