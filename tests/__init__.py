# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the catalog API:
# - test_utils.py: Input validation and normalization helpers
# - test_passwords.py / test_tokens.py / test_login_attempts.py: auth building blocks
# - test_auth.py: Login, bearer-token guard, profile and password endpoints
# - test_products.py / test_catalog.py / test_contacts.py: resource endpoints
# - test_middleware.py: Security headers, CORS, rate limiting, health
#
# Run tests with: pytest
# =============================================================================
