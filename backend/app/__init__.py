"""
Product Catalog Backend — Application Package Initializer
===========================================================

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, uploads
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Product workflows, image store
    ├─────────────────────────────────────┤
    │            Repositories             │  ← Product persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
