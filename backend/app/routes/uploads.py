"""
Product Catalog Backend — Uploaded Image Serving
==================================================

What:  GET /<upload_url_prefix>/{filename} serves stored product images.
Who:   Requested by <img> tags pointing at a product's `image` URL.

The router has no prefix of its own; create_app() mounts it under the
configured upload prefix so stored paths and served paths always agree.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.dependencies import get_image_store
from app.exceptions import NotFoundError
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.get(
    "/{filename}",
    summary="Serve an uploaded product image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found"},
    },
)
async def serve_upload(
    filename: str,
    image_store: ImageStore = Depends(get_image_store),
) -> FileResponse:
    """
    Return a stored image.

    Names that resolve outside the upload directory are treated as missing.
    Content type is guessed from the filename.
    """
    path = image_store.resolve(filename)
    if path is None:
        logger.info("Requested image not stored: %s", filename)
        raise NotFoundError(resource="file", resource_id=filename)

    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
