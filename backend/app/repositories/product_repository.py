"""
Product Catalog Backend — Product Repository
==============================================

What:  Persistence of product records, keyed by a generated id.
Why:   Keeps SQLAlchemy out of the service layer and turns driver errors into
       the application's own error kinds.
How:   Wraps one AsyncSession (the request's) with create / list / get /
       update / delete. Writes are flushed; the service calls commit() once
       per request before answering.

Error translation:
    Missing or malformed fields  → ValidationError
    Any SQLAlchemyError          → DatabaseError
    Unknown id                   → None (the service decides it's a 404)
    Failed commit                → DatabaseError
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, ValidationError
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def _validation_error(exc: PydanticValidationError) -> ValidationError:
    fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
    return ValidationError(
        message=f"Product validation failed: {', '.join(fields)}",
        context={"fields": fields},
    )


class ProductRepository:
    """CRUD access to the products table for one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, fields: Dict[str, Any]) -> Product:
        """
        Insert a new product and return it with its generated id.

        Raises:
            ValidationError: name, price or description missing or malformed
            DatabaseError: the insert failed
        """
        try:
            data = ProductCreate.model_validate(fields)
        except PydanticValidationError as e:
            raise _validation_error(e)

        product = Product(**data.model_dump())
        try:
            self.session.add(product)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating product: %s", str(e))
            raise DatabaseError(
                message="Could not save the product. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Product created: %s", product.id)
        return product

    async def list_all(self) -> List[Product]:
        """All products in insertion order. No filtering, no pagination."""
        try:
            result = await self.session.execute(
                select(Product).order_by(Product.created_at, Product.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing products: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve products. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        try:
            return await self.session.get(Product, product_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the product. Please try again.",
                context={"product_id": product_id},
            )

    async def update_by_id(self, product_id: str, fields: Dict[str, Any]) -> Optional[Product]:
        """
        Merge the provided fields into an existing product.

        Fields that are None are left unchanged.

        Returns:
            The updated product, or None if no product has this id.
        """
        try:
            data = ProductUpdate.model_validate(fields)
        except PydanticValidationError as e:
            raise _validation_error(e)

        product = await self.get_by_id(product_id)
        if product is None:
            return None

        for key, value in data.model_dump(exclude_none=True).items():
            setattr(product, key, value)

        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not update the product. Please try again.",
                context={"product_id": product_id},
            )

        logger.info("Product updated: %s", product.id)
        return product

    async def delete_by_id(self, product_id: str) -> Optional[Product]:
        """
        Remove a product.

        Returns:
            The removed product, or None if no product has this id.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            return None

        try:
            await self.session.delete(product)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting product %s: %s", product_id, str(e))
            raise DatabaseError(
                message="Could not delete the product. Please try again.",
                context={"product_id": product_id},
            )

        logger.info("Product deleted: %s", product.id)
        return product

    async def commit(self) -> None:
        """
        Commit the request's pending writes.

        Awaited by the service before the response is built.

        Raises:
            DatabaseError: the commit failed (the session is rolled back)
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Database error committing changes: %s", str(e))
            raise DatabaseError(
                message="Could not save changes. Please try again.",
                context={"error_type": type(e).__name__},
            )
