# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared request checks.
#
# Path ids are validated by a dependency rather than a typed path
# parameter: dependencies run in declaration order, so listing the id
# check before AdminDep rejects malformed ids (400) before the token is
# even looked at, and always before any data-store call.
# =============================================================================

from typing import Annotated, Callable

from fastapi import Depends, Request

from app.exceptions import InvalidIdError
from lib.utils import is_valid_uuid


def valid_uuid(param: str) -> Callable[[Request], str]:
    """
    Build a dependency that returns path parameter `param` if it is a UUID.

    Raises:
        InvalidIdError: 400 when the parameter is not a well-formed UUID
    """

    def dependency(request: Request) -> str:
        value = request.path_params.get(param)
        if not is_valid_uuid(value):
            raise InvalidIdError(param)
        return value

    dependency.__name__ = f"valid_uuid_{param}"
    return dependency


# Type aliases for the path parameter names used by the routers
IdParam = Annotated[str, Depends(valid_uuid("id"))]
ImageIdParam = Annotated[str, Depends(valid_uuid("image_id"))]
