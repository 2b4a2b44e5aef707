# =============================================================================
# core/services/product_service.py - Product Business Logic
# =============================================================================
# Product reads (with embedded category, brand and images), admin writes,
# and product image management (CDN upload + product_images row).
#
# An image uploaded to the CDN whose row insert then fails stays on the
# CDN; there is no compensating delete.
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    InvalidIdError,
    MissingFieldsError,
    NotFoundError,
    ProductNotFoundError,
)
from core.models.product import ProductCreate, ProductUpdate
from lib.cdn import ImageCDN, PRODUCT_IMAGE
from lib.supabase_client import SupabaseClient
from lib.utils import blank_fields, blank_to_none, is_valid_uuid, missing_fields, slugify, sort_images

logger = logging.getLogger(__name__)

# Products embed their category, brand and ordered image list
PRODUCT_SELECT = (
    "*, "
    "category:categories(id, name, slug, icon, color), "
    "brand:brands(id, name, slug), "
    "images:product_images(id, url, display_order)"
)

FOREIGN_KEYS = ("category_id", "brand_id")


def _with_sorted_images(product: dict[str, Any]) -> dict[str, Any]:
    product["images"] = sort_images(product.get("images"))
    return product


def _check_foreign_keys(data: dict[str, Any]) -> None:
    """Non-empty foreign keys must be UUIDs; checked before the insert/update."""
    for field in FOREIGN_KEYS:
        value = data.get(field)
        if value is not None and not is_valid_uuid(value):
            raise InvalidIdError(field)


class ProductService:
    """
    Service for product operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Public Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def _list(action: str, filters: dict[str, Any] | None = None, order: str = "created_at", desc: bool = True) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        query = client.table("products").select(PRODUCT_SELECT)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        query = query.order(order, desc=desc)

        products = SupabaseClient.run(query, action) or []
        return [_with_sorted_images(p) for p in products]

    @staticmethod
    def list_products() -> list[dict[str, Any]]:
        """All products, newest first."""
        return ProductService._list("list products")

    @staticmethod
    def list_coming_soon() -> list[dict[str, Any]]:
        """Products flagged is_featured ("coming soon"), by name."""
        return ProductService._list(
            "list coming-soon products",
            filters={"is_featured": True},
            order="name",
            desc=False,
        )

    @staticmethod
    def list_new() -> list[dict[str, Any]]:
        """Products flagged is_new, newest first."""
        return ProductService._list("list new products", filters={"is_new": True})

    @staticmethod
    def get_product(product_id: str) -> dict[str, Any]:
        """
        Get one product with its embeds.

        Raises:
            ProductNotFoundError: If no product has this id
        """
        client = SupabaseClient.get_client()
        query = (
            client.table("products")
            .select(PRODUCT_SELECT)
            .eq("id", product_id)
            .single()
        )
        product = SupabaseClient.run_single(query, "get product")
        if not product:
            raise ProductNotFoundError(product_id)
        return _with_sorted_images(product)

    # -------------------------------------------------------------------------
    # Admin Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_product(request: ProductCreate) -> dict[str, Any]:
        """
        Create a product.

        Raises:
            MissingFieldsError: If code, name or category_id is empty
            InvalidIdError: If a foreign key is not a UUID
        """
        data = request.model_dump(exclude_none=True)

        missing = missing_fields(data, ProductCreate.REQUIRED)
        if missing:
            raise MissingFieldsError(missing)

        blank_to_none(data, "brand_id")
        _check_foreign_keys(data)
        data["slug"] = slugify(data["name"])

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("products").insert(data),
            "create product",
            message="Error al crear el producto",
        )
        product = rows[0]
        logger.info(f"Created product: {product.get('id')} ({data['code']})")
        return product

    @staticmethod
    def update_product(product_id: str, request: ProductUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Empty-string foreign keys are stored as NULL. The slug follows the
        name whenever a name is sent.

        Raises:
            MissingFieldsError: If code or name is sent blank
            ProductNotFoundError: If no product has this id
        """
        data = request.model_dump(exclude_unset=True)
        blank = blank_fields(data, ("code", "name"))
        if blank:
            raise MissingFieldsError(blank)
        blank_to_none(data, *FOREIGN_KEYS)
        _check_foreign_keys(data)

        if data.get("name"):
            data["slug"] = slugify(data["name"])

        if not data:
            return ProductService.get_product(product_id)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("products").update(data).eq("id", product_id),
            "update product",
            message="Error al actualizar el producto",
        )
        if not rows:
            raise ProductNotFoundError(product_id)

        logger.info(f"Updated product: {product_id}")
        return rows[0]

    @staticmethod
    def delete_product(product_id: str) -> None:
        client = SupabaseClient.get_client()
        SupabaseClient.run(
            client.table("products").delete().eq("id", product_id),
            "delete product",
            message="Error al eliminar el producto",
        )
        logger.info(f"Deleted product: {product_id}")

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    @staticmethod
    def next_image_order(product_id: str) -> int:
        """display_order for a new image: one past the current maximum, or 0."""
        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("product_images")
            .select("display_order")
            .eq("product_id", product_id)
            .order("display_order", desc=True)
            .limit(1),
            "fetch image order",
        )
        if rows and rows[0].get("display_order") is not None:
            return rows[0]["display_order"] + 1
        return 0

    @staticmethod
    def add_image(product_id: str, content: bytes, filename: str | None = None) -> dict[str, Any]:
        """
        Upload an image to the CDN and append it to the product's gallery.

        The file must already be validated (see app.routers.uploads).

        Returns:
            The inserted product_images row
        """
        url = ImageCDN.upload(content, PRODUCT_IMAGE, filename=filename)
        order = ProductService.next_image_order(product_id)

        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("product_images").insert({
                "product_id": product_id,
                "url": url,
                "display_order": order,
            }),
            "insert product image",
            message="Error al guardar la imagen",
        )
        logger.info(f"Added image to product {product_id} at position {order}")
        return rows[0]

    @staticmethod
    def delete_image(product_id: str, image_id: str) -> None:
        """
        Remove an image row (the CDN asset is left in place).

        Raises:
            NotFoundError: If the image does not belong to the product
        """
        client = SupabaseClient.get_client()
        rows = SupabaseClient.run(
            client.table("product_images")
            .delete()
            .eq("id", image_id)
            .eq("product_id", product_id),
            "delete product image",
            message="Error al eliminar la imagen",
        )
        if not rows:
            raise NotFoundError("Imagen no encontrada", code="IMAGE_NOT_FOUND", details={"image_id": image_id})
        logger.info(f"Deleted image {image_id} from product {product_id}")
