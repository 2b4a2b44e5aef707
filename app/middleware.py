# =============================================================================
# app/middleware.py - HTTP Middleware
# =============================================================================
# Function-style middleware registered in main.py:
# - security_headers_middleware: hardening headers on every response,
#   no-store caching on /api/admin responses
# - request_logging_middleware: one log line per request
# =============================================================================

import logging
import time

from fastapi import Request

logger = logging.getLogger("app.requests")

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline'",
    "img-src 'self' data: https: blob:",
    "connect-src 'self' https://*.supabase.co https://res.cloudinary.com",
    "font-src 'self' https: data:",
    "object-src 'none'",
    "media-src 'self'",
    "frame-src 'none'",
])

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    if request.url.path.startswith("/api/admin"):
        for name, value in NO_STORE_HEADERS.items():
            response.headers[name] = value
    if "server" in response.headers:
        del response.headers["server"]
    return response


async def request_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
    return response
