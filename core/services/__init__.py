# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .product_service import ProductService
from .catalog_service import BrandService, CategoryService
from .contact_service import ContactService
from .admin_service import AdminService
from .stats_service import StatsService

__all__ = [
    "ProductService",
    "CategoryService",
    "BrandService",
    "ContactService",
    "AdminService",
    "StatsService",
]
