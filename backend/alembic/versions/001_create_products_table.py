"""Create products table

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `products` table holding the catalog.
Rollback: downgrade() drops the table (all products lost; image files stay).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Column meanings are documented on app/models/product.py."""
    op.create_table(
        "products",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        # Relative public path (/uploads/<name>); NULL when no image
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # List returns products in insertion order
    op.create_index("idx_products_created_at", "products", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_products_created_at", table_name="products")
    op.drop_table("products")
