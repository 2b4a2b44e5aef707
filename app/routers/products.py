# =============================================================================
# app/routers/products.py - Product Endpoints
# =============================================================================
# Public catalog reads and admin product/image management.
#
# router        mounted at /api        (public)
# admin_router  mounted at /api/admin  (bearer token required)
#
# Admin routes list the id dependency before AdminDep so malformed ids are
# rejected first.
#
# Handlers are plain functions because supabase-py is synchronous; FastAPI
# runs them in its threadpool. Upload handlers are async to read the file
# and hand the service call to run_in_threadpool.
# =============================================================================

from typing import Any

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.auth import AdminDep
from app.auth.models import MessageResponse
from app.dependencies import IdParam, ImageIdParam
from app.routers.uploads import read_image
from core.models.product import ProductCreate, ProductUpdate
from core.services.product_service import ProductService

router = APIRouter()
admin_router = APIRouter()


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/products")
def list_products() -> list[dict[str, Any]]:
    """All products with category, brand and images, newest first."""
    return ProductService.list_products()


@router.get("/products/coming-soon")
def list_coming_soon_products() -> list[dict[str, Any]]:
    """Products flagged as coming soon, ordered by name."""
    return ProductService.list_coming_soon()


@router.get("/products/new")
def list_new_products() -> list[dict[str, Any]]:
    return ProductService.list_new()


@router.get("/products/{id}")
def get_product(id: IdParam) -> dict[str, Any]:
    """
    Get one product.

    Returns 400 for a malformed id and 404 when no product matches.
    """
    return ProductService.get_product(id)


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.post("/products")
def create_product(request: ProductCreate, admin: AdminDep) -> dict[str, Any]:
    """Create a product. code, name and category_id are required."""
    return ProductService.create_product(request)


@admin_router.put("/products/{id}")
def update_product(id: IdParam, admin: AdminDep, request: ProductUpdate) -> dict[str, Any]:
    """
    Update a product.

    Only fields present in the body change. Send "" for brand_id or
    category_id to clear them.
    """
    return ProductService.update_product(id, request)


@admin_router.delete("/products/{id}", response_model=MessageResponse)
def delete_product(id: IdParam, admin: AdminDep) -> MessageResponse:
    ProductService.delete_product(id)
    return MessageResponse(message="Producto eliminado")


@admin_router.post("/products/{id}/images")
async def upload_product_image(
    id: IdParam,
    admin: AdminDep,
    image: UploadFile | None = File(default=None),
) -> dict[str, Any]:
    """
    Upload a product image (multipart field `image`).

    Accepts JPEG, PNG, GIF or WebP up to MAX_IMAGE_SIZE_MB. The image is
    appended after the product's existing images.
    """
    content = await read_image(image)
    return await run_in_threadpool(ProductService.add_image, id, content, image.filename)


@admin_router.delete("/products/{id}/images/{image_id}", response_model=MessageResponse)
def delete_product_image(id: IdParam, image_id: ImageIdParam, admin: AdminDep) -> MessageResponse:
    ProductService.delete_image(id, image_id)
    return MessageResponse(message="Imagen eliminada")
