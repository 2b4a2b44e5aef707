# =============================================================================
# app/routers/categories.py - Category Endpoints
# =============================================================================

from typing import Any

from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.auth import AdminDep
from app.auth.models import MessageResponse
from app.dependencies import IdParam
from app.routers.uploads import read_image
from core.models.catalog import CategoryCreate, CategoryUpdate
from core.services.catalog_service import CategoryService

router = APIRouter()
admin_router = APIRouter()


@router.get("/categories")
def list_categories() -> list[dict[str, Any]]:
    """All categories ordered by name."""
    return CategoryService.list_all()


@admin_router.post("/categories")
def create_category(request: CategoryCreate, admin: AdminDep) -> dict[str, Any]:
    return CategoryService.create(request)


@admin_router.put("/categories/{id}")
def update_category(id: IdParam, admin: AdminDep, request: CategoryUpdate) -> dict[str, Any]:
    return CategoryService.update(id, request)


@admin_router.delete("/categories/{id}", response_model=MessageResponse)
def delete_category(id: IdParam, admin: AdminDep) -> MessageResponse:
    CategoryService.delete(id)
    return MessageResponse(message="Categoría eliminada")


@admin_router.post("/categories/{id}/image")
async def upload_category_image(
    id: IdParam,
    admin: AdminDep,
    image: UploadFile | None = File(default=None),
) -> dict[str, Any]:
    """Replace the category image (multipart field `image`)."""
    content = await read_image(image)
    return await run_in_threadpool(CategoryService.set_image, id, content, image.filename)
