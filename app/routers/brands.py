# =============================================================================
# app/routers/brands.py - Brand Endpoints
# =============================================================================

from typing import Any

from fastapi import APIRouter

from app.auth import AdminDep
from app.auth.models import MessageResponse
from app.dependencies import IdParam
from core.models.catalog import BrandCreate, BrandUpdate
from core.services.catalog_service import BrandService

router = APIRouter()
admin_router = APIRouter()


@router.get("/brands")
def list_brands() -> list[dict[str, Any]]:
    return BrandService.list_all()


@admin_router.post("/brands")
def create_brand(request: BrandCreate, admin: AdminDep) -> dict[str, Any]:
    return BrandService.create(request)


@admin_router.put("/brands/{id}")
def update_brand(id: IdParam, admin: AdminDep, request: BrandUpdate) -> dict[str, Any]:
    return BrandService.update(id, request)


@admin_router.delete("/brands/{id}", response_model=MessageResponse)
def delete_brand(id: IdParam, admin: AdminDep) -> MessageResponse:
    BrandService.delete(id)
    return MessageResponse(message="Marca eliminada")
