"""
Product Catalog Backend — Pydantic Request/Response Schemas
=============================================================

What:  Pydantic models defining the API contract between clients and backend.
Why:   Field coercion for form input, response serialization, and OpenAPI docs.
Who:   ProductRepository validates incoming fields with the input models;
       route handlers return the response models.

Input arrives as multipart form strings, so the input models run in
Pydantic's lax mode: "1.5" becomes 1.5, "abc" is rejected.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Input Models: fields accepted on create and update
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """All three fields are required to create a record."""
    name: str = Field(min_length=1)
    price: float = Field(allow_inf_nan=False)
    description: str = Field(min_length=1)
    image: Optional[str] = None


class ProductUpdate(BaseModel):
    """
    Partial update. Fields left as None are not touched, so a client may
    send only the fields it wants to change.
    """
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    description: Optional[str] = Field(default=None, min_length=1)
    image: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """
    What:  Public representation of a product record.
    Who:   Returned by every product endpoint except delete.

    `image` is the stored relative path on create, and an absolute URL
    (scheme + host + path) on list and update.
    """
    id: str = Field(description="Unique product identifier")
    name: str = Field(description="Product name")
    price: float = Field(description="Product price")
    description: str = Field(description="Product description")
    image: Optional[str] = Field(
        default=None,
        description="Image path or URL; null when no image was uploaded",
    )

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Product not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Upload directory: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")

