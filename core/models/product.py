# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the API contract for product writes:
# - ProductCreate: POST /api/admin/products
# - ProductUpdate: PUT /api/admin/products/{id} (partial)
# - ProductStatus: stock state shown on the storefront
#
# Reads return rows straight from the data store with embedded
# category, brand and images (see PRODUCT_SELECT in product_service).
#
# Unknown keys in request bodies are ignored, not stored.
# =============================================================================

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ProductStatus(str, Enum):
    """
    Stock state of a product.

    - available: in stock
    - out_of_stock: sold out, or not yet arrived when is_featured ("coming soon")
    """
    AVAILABLE = "available"
    OUT_OF_STOCK = "out_of_stock"


class ProductFields(BaseModel):
    """Columns an admin may write. All optional; required-ness is per operation."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    # Internal catalog code, e.g. "KOS-0022"
    code: str | None = Field(default=None, max_length=50)

    # Display name; the slug is derived from it
    name: str | None = Field(default=None, max_length=200)

    description: str | None = Field(default=None, max_length=5000)

    # Foreign keys. "" means "clear" and is stored as NULL.
    category_id: str | None = None
    brand_id: str | None = None

    status: ProductStatus | None = None
    price: float | None = Field(default=None, ge=0)

    # "Coming soon" and "new arrival" flags
    is_featured: bool | None = None
    is_new: bool | None = None

    # Dimensions in centimeters
    length: float | None = Field(default=None, ge=0)
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)


class ProductCreate(ProductFields):
    """
    Schema for creating a product.

    code, name and category_id are required (checked by ProductService so
    the client gets MISSING_FIELDS).

    Example:
        {
            "code": "SUD-0005",
            "name": "Tina ovalada con jabonera de 35",
            "category_id": "7e49301d-97d6-4a98-b7b0-5c8d2f4bfa56",
            "brand_id": "",
            "status": "available"
        }
    """

    REQUIRED: ClassVar[tuple[str, ...]] = ("code", "name", "category_id")


class ProductUpdate(ProductFields):
    """Partial update: only keys present in the request body are written."""
