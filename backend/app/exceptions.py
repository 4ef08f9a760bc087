"""
Product Catalog Backend — Custom Exception Hierarchy
======================================================

What:  Defines the closed set of application errors.
Why:   Raw driver and OS errors never reach the client; each failure is
       translated into one of a few kinds with a fixed HTTP status.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses.
Who:   Raised by the repository, image store, and product service.
When:  During request processing.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError    → 500 (missing or malformed field)
    ├── NotFoundError      → 404
    ├── DatabaseError      → 500 (persistence unavailable or failed)
    └── FileStorageError   → 500 (upload could not be written)

ValidationError maps to 500 rather than 400: clients of this API have always
received 500 for rejected records, and the status boundary is kept as-is.

File cleanup failures are deliberately absent from this list. They are
logged by the image store and never surface to the client.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """
    Raised when a product record cannot be built from the client's input.

    When:    Required field missing on create, price not numeric, or empty text.
    HTTP:    500 Internal Server Error

    Example response:
        {
            "error": "validation_error",
            "message": "Product validation failed",
            "details": {"fields": ["price"]},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    The repository returns None for missing records; the service converts
    that into NotFoundError so the 404 is produced by the global handler.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(CatalogError):
    """
    Raised when database operations fail unexpectedly.

    What:    Connection refused, lost mid-query, constraint violation, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is generic. Driver details go to
    the context and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(CatalogError):
    """
    Raised when an uploaded image cannot be written to the upload directory.

    When:    Disk full, permission denied, directory missing or not writable.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Failed to save uploaded image. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
