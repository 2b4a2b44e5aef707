# =============================================================================
# core/models/catalog.py - Category and Brand Schemas
# =============================================================================
# Write schemas for the two lookup tables products reference.
# Slugs are never accepted from clients; they are derived from `name`.
# =============================================================================

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class CategoryFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    # Icon name understood by the storefront (e.g. "Hook") and a hex color
    icon: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, max_length=20)

    display_order: int | None = None
    image_url: str | None = None


class CategoryCreate(CategoryFields):
    REQUIRED: ClassVar[tuple[str, ...]] = ("name",)


class CategoryUpdate(CategoryFields):
    pass


class BrandFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    logo_url: str | None = None


class BrandCreate(BrandFields):
    REQUIRED: ClassVar[tuple[str, ...]] = ("name",)


class BrandUpdate(BrandFields):
    pass
