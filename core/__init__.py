# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the catalog's business logic:
# - models/: Pydantic request schemas for products, categories, brands, contacts
# - services/: Validation, normalization and data-store access per resource
#
# Services raise app.exceptions errors and never build HTTP responses;
# routers in app/routers stay thin.
# =============================================================================
