"""
Product Catalog Backend — Product SQLAlchemy Model
====================================================

What:  ORM model representing the `products` table, the catalog's only
       collection of records.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by ProductRepository for CRUD operations.

Table Design:
    - id: UUID4 text generated in Python on insert, so SQLite and PostgreSQL
      behave the same and the id is known before the INSERT is flushed
    - image: relative public path (/uploads/<name>), never an absolute URL,
      so stored rows stay host-agnostic
    - created_at: gives `list` a stable insertion order; not exposed in the API
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Product(Base):
    """
    A product in the catalog.

    Lifecycle:
        1. Created with name, price, description and an optional image path
        2. Any field may be replaced on update; a replaced image's file is
           deleted best-effort
        3. Deleted together with its image file (best-effort, not atomic)
    """

    __tablename__ = "products"

    # Opaque to clients; any string that matches no row is simply "not found"
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # No currency or range semantics; just a number
    price: Mapped[float] = mapped_column(Float, nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # NULL when no file was uploaded
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_products_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
