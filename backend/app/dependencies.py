"""
Product Catalog Backend — Request Dependencies
================================================

What:  FastAPI dependencies that hand route handlers their collaborators.
How:   Long-lived objects (image store, upload handler) are built once in
       create_app() and kept on app.state; the repository and service are
       built per request around that request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.repositories.product_repository import ProductRepository
from app.services.image_store import ImageStore
from app.services.product_service import ProductService
from app.services.upload_handler import UploadHandler


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_upload_handler(request: Request) -> UploadHandler:
    return request.app.state.upload_handler


def get_product_repository(
    db: AsyncSession = Depends(get_db_session),
) -> ProductRepository:
    return ProductRepository(db)


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository),
    image_store: ImageStore = Depends(get_image_store),
) -> ProductService:
    return ProductService(repository=repository, image_store=image_store)
