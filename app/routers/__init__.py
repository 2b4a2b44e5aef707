# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Product listings, admin CRUD and product images
# - categories.py: Category listings, admin CRUD and category image
# - brands.py: Brand listings and admin CRUD
# - contacts.py: Public contact form and admin inbox
# - stats.py: Admin dashboard counters
# - uploads.py: Shared image upload validation
#
# Feature modules expose `router` (public, mounted at /api) and/or
# `admin_router` (mounted at /api/admin).
# =============================================================================

from . import health
from . import products
from . import categories
from . import brands
from . import contacts
from . import stats

__all__ = [
    "health",
    "products",
    "categories",
    "brands",
    "contacts",
    "stats",
]
