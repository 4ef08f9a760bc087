"""
Product Catalog Backend — Product Service (Business Logic Orchestrator)
=========================================================================

What:  Implements create, list, update and delete on top of the repository
       and the image store, and shapes the records returned to clients.
Why:   Keeps HTTP handling in the routes and persistence in the repository.
Who:   Called by route handlers; one instance per request, built by
       app.dependencies with that request's repository.

Workflows:
    Create:  persist + commit record (image path already stored by UploadHandler)
    List:    fetch all → rewrite image paths to absolute URLs
    Update:  fetch existing → persist merged fields → commit
             → schedule old image deletion if replaced → absolute image URL
    Delete:  remove record → commit → schedule deletion of its image

Every write is committed before the response is built and before any
image deletion is scheduled, so a failed commit answers 500 and leaves the
old files in place. Image deletion is handed to FastAPI BackgroundTasks.
It runs after the response is sent and its failure is only logged, so a
record can be updated or deleted while its old file lingers. Nothing here
makes the record change and the file change atomic.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks

from app.exceptions import NotFoundError
from app.models.product import Product
from app.repositories.product_repository import ProductRepository
from app.schemas.product import MessageResponse, ProductResponse
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"
PRODUCT_DELETED = "Product deleted successfully"


def absolute_url(base_url: str, path: Optional[str]) -> Optional[str]:
    """
    Prefix a stored relative path with the request's scheme and host.

    Stored values stay relative so the database is host-agnostic; clients on
    another origin get a fully qualified URL.
    """
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def to_response(product: Product, base_url: Optional[str] = None) -> ProductResponse:
    response = ProductResponse.model_validate(product)
    if base_url is not None:
        response.image = absolute_url(base_url, response.image)
    return response


class ProductService:
    """Business logic layer for product operations."""

    def __init__(self, repository: ProductRepository, image_store: ImageStore):
        self.repository = repository
        self.image_store = image_store

    def _schedule_image_deletion(
        self, background_tasks: BackgroundTasks, image_path: Optional[str]
    ) -> None:
        if image_path:
            background_tasks.add_task(self.image_store.delete, image_path)
            logger.debug("Scheduled deletion of %s", image_path)

    async def create_product(
        self,
        fields: Dict[str, Any],
        image_path: Optional[str] = None,
    ) -> ProductResponse:
        """
        Persist a new product. The image stays a relative path in the response.

        Raises:
            ValidationError: a required field is missing or malformed
            DatabaseError: the insert failed
        """
        record = dict(fields, image=image_path)
        product = await self.repository.create(record)
        await self.repository.commit()
        return to_response(product)

    async def list_products(self, base_url: str) -> List[ProductResponse]:
        """Every product, with image paths rewritten to absolute URLs."""
        products = await self.repository.list_all()
        return [to_response(product, base_url) for product in products]

    async def update_product(
        self,
        product_id: str,
        fields: Dict[str, Any],
        background_tasks: BackgroundTasks,
        base_url: str,
        image_path: Optional[str] = None,
    ) -> ProductResponse:
        """
        Merge new field values (and optionally a new image) into a product.

        Raises:
            NotFoundError: no product with this id (nothing is created)
            ValidationError: a provided field is malformed
            DatabaseError: the update failed
        """
        existing = await self.repository.get_by_id(product_id)
        if existing is None:
            raise NotFoundError(resource="product", resource_id=product_id, message=PRODUCT_NOT_FOUND)

        updates = dict(fields)
        if image_path:
            old_image = existing.image
            updates["image"] = image_path
        else:
            old_image = None

        product = await self.repository.update_by_id(product_id, updates)
        if product is None:
            # Deleted by a concurrent request between the fetch and the update
            raise NotFoundError(resource="product", resource_id=product_id, message=PRODUCT_NOT_FOUND)

        await self.repository.commit()

        if old_image and old_image != image_path:
            self._schedule_image_deletion(background_tasks, old_image)

        return to_response(product, base_url)

    async def delete_product(
        self,
        product_id: str,
        background_tasks: BackgroundTasks,
    ) -> MessageResponse:
        """
        Remove a product and, best-effort, its image file.

        Raises:
            NotFoundError: no product with this id
            DatabaseError: the delete failed
        """
        product = await self.repository.delete_by_id(product_id)
        if product is None:
            raise NotFoundError(resource="product", resource_id=product_id, message=PRODUCT_NOT_FOUND)

        await self.repository.commit()
        self._schedule_image_deletion(background_tasks, product.image)
        return MessageResponse(message=PRODUCT_DELETED)
