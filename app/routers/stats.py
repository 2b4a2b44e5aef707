# =============================================================================
# app/routers/stats.py - Admin Dashboard Statistics
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.auth import AdminDep
from core.services.stats_service import StatsService

admin_router = APIRouter()


class StatsResponse(BaseModel):
    """Counters shown on the admin dashboard (camelCase for the storefront)."""
    totalProducts: int
    availableProducts: int
    outOfStock: int
    totalCategories: int
    totalBrands: int
    unreadMessages: int


@admin_router.get("/stats", response_model=StatsResponse)
def get_stats(admin: AdminDep) -> StatsResponse:
    return StatsResponse(**StatsService.get_stats())
