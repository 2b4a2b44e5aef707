# =============================================================================
# app/__main__.py - Development Server
# =============================================================================
# Usage:
#   python -m app
# =============================================================================

import uvicorn

from app.config import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development and settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        server_header=False,
    )


if __name__ == "__main__":
    main()
