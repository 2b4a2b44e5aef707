# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for request validation:
# - product.py: Product write schemas and stock status
# - catalog.py: Category and brand write schemas
# - contact.py: Contact form and admin read-state schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .product import (
    ProductCreate,
    ProductFields,
    ProductStatus,
    ProductUpdate,
)

from .catalog import (
    BrandCreate,
    BrandUpdate,
    CategoryCreate,
    CategoryUpdate,
)

from .contact import (
    MAX_EMAIL_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    ContactCreate,
    ContactUpdate,
)

__all__ = [
    # Products
    "ProductCreate",
    "ProductFields",
    "ProductStatus",
    "ProductUpdate",
    # Categories / Brands
    "BrandCreate",
    "BrandUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    # Contacts
    "MAX_EMAIL_LENGTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_NAME_LENGTH",
    "ContactCreate",
    "ContactUpdate",
]
