"""
Product Catalog Backend — Upload Handler
==========================================

What:  Takes the single optional file of a product form submission, stores
       it in the ImageStore, and derives the public path for the record.
Who:   Called by the product routes before the record is built.
When:  On create and update; the file is stored before the database is
       touched, so a failed save can leave an orphaned file behind.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import UploadFile

from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)


class UploadHandler:
    """Stores at most one uploaded image per request."""

    def __init__(self, image_store: ImageStore, url_prefix: str):
        self.image_store = image_store
        self.url_prefix = url_prefix.strip("/")

    def public_path(self, stored_name: str) -> str:
        """URL path for a stored file; the name is percent-encoded, the file on disk is not."""
        return f"/{self.url_prefix}/{quote(stored_name)}"

    async def handle(self, upload: Optional[UploadFile]) -> Optional[str]:
        """
        Store the uploaded file, if any.

        Returns:
            /<url_prefix>/<stored_name>, or None when the request carried no
            file (browsers send an empty filename for an untouched file input).

        Raises:
            FileStorageError if the file cannot be written.
        """
        if upload is None or not upload.filename:
            return None

        try:
            content = await upload.read()
            logger.info(
                "Received upload: filename=%s, size=%d bytes",
                upload.filename,
                len(content),
            )
            stored_name = await self.image_store.save(upload.filename, content)
        finally:
            await upload.close()

        return self.public_path(stored_name)
