"""
Product Catalog Backend — Product Route Handlers
==================================================

What:  POST/GET /products and PUT/DELETE /products/{id}.
How:   Reads form fields and the optional `image` file, stores the file via
       the UploadHandler, delegates the rest to ProductService.
Who:   Called by the storefront / admin UI.

Request Flow (create and update):
    1. Multipart form arrives: name, price, description, optional image
    2. UploadHandler stores the file first (if any) and yields /uploads/<name>
    3. ProductService merges the path with the form fields and persists
    4. JSON record returned with HTTP 200

Form fields are declared optional: a missing field is rejected by
the repository as a ValidationError (500), not by FastAPI's 422.
POST and PUT also accept the same fields as an application/json object.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile

from app.dependencies import get_product_service, get_upload_handler
from app.exceptions import ValidationError
from app.schemas.product import ErrorResponse, MessageResponse, ProductResponse
from app.services.product_service import ProductService
from app.services.upload_handler import UploadHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

PRODUCT_FIELDS = ("name", "price", "description")


async def read_product_fields(
    request: Request,
    name: Optional[str],
    price: Optional[str],
    description: Optional[str],
) -> Dict[str, Any]:
    """
    Product fields from the form, or from a JSON object body when the client
    sends application/json. A JSON body carries no file.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        return {"name": name, "price": price, "description": description}

    try:
        body = await request.json()
    except ValueError:
        logger.warning("Rejected product body: malformed JSON")
        raise ValidationError(message="Request body is not valid JSON")
    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return {key: body.get(key) for key in PRODUCT_FIELDS}


@router.post(
    "",
    status_code=200,
    response_model=ProductResponse,
    responses={
        200: {"description": "Product created", "model": ProductResponse},
        500: {"description": "Validation or persistence error", "model": ErrorResponse},
    },
    summary="Create a product",
)
async def create_product(
    request: Request,
    name: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None, description="Optional product image"),
    upload_handler: UploadHandler = Depends(get_upload_handler),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    image_path = await upload_handler.handle(image)
    fields = await read_product_fields(request, name, price, description)
    return await service.create_product(fields, image_path=image_path)


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List all products",
    description="Returns every product; image paths are returned as absolute URLs.",
)
async def list_products(
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> List[ProductResponse]:
    return await service.list_products(base_url=str(request.base_url))


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        200: {"description": "Updated product", "model": ProductResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Validation or persistence error", "model": ErrorResponse},
    },
    summary="Update a product",
    description=(
        "Replaces the provided fields. A new image replaces the old one; the old "
        "file is deleted after the response is sent."
    ),
)
async def update_product(
    product_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None, description="Optional replacement image"),
    upload_handler: UploadHandler = Depends(get_upload_handler),
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    image_path = await upload_handler.handle(image)
    fields = await read_product_fields(request, name, price, description)
    return await service.update_product(
        product_id,
        fields,
        background_tasks=background_tasks,
        base_url=str(request.base_url),
        image_path=image_path,
    )


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Product deleted", "model": MessageResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a product and its image",
)
async def delete_product(
    product_id: str,
    background_tasks: BackgroundTasks,
    service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    return await service.delete_product(product_id, background_tasks=background_tasks)
