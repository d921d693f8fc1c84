"""
Bearer-token dependency for FastAPI routes.

``create_auth_dependency`` turns an AuthProvider getter into a dependency
returning the caller's user id (the token's ``sub`` claim). Handlers pass
that id on explicitly; nothing is stored on the request.

Example:
    require_auth = create_auth_dependency(lambda: JWTAuth(secret="..."))

    @router.get("/learning-plans/{plan_id}/progress")
    async def get_progress(plan_id: str, user_id: str = Depends(require_auth)):
        ...
"""

from typing import Callable, Optional

from fastapi import Header

from common.auth.base import AuthProvider
from common.utils.exceptions import APIException


def _unauthorized(message: str, code: str, scheme: str) -> APIException:
    return APIException(
        status_code=401,
        message=message,
        code=code,
        headers={"WWW-Authenticate": scheme},
    )


def create_auth_dependency(
    get_auth_provider: Callable[[], AuthProvider],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Build a dependency that resolves the calling user's id.

    Error codes (all 401): UNAUTHORIZED when the header is absent,
    INVALID_AUTH_SCHEME for a non-``scheme`` header, EMPTY_TOKEN, and
    INVALID_TOKEN when verification fails or ``sub`` is missing.

    Args:
        get_auth_provider: Returns the provider used to verify tokens
        header_name: Request header carrying the credentials
        scheme: Expected scheme word before the token
    """

    async def get_current_user_id(
        authorization: Optional[str] = Header(None, alias=header_name),
    ) -> str:
        if not authorization:
            raise _unauthorized("Missing authorization header", "UNAUTHORIZED", scheme)

        given_scheme, _, token = authorization.partition(" ")
        if given_scheme != scheme:
            raise _unauthorized(
                f"Expected {scheme} authorization", "INVALID_AUTH_SCHEME", scheme
            )
        token = token.strip()
        if not token:
            raise _unauthorized("Token is empty", "EMPTY_TOKEN", scheme)

        try:
            claims = await get_auth_provider().verify_token(token)
        except ValueError as e:
            raise _unauthorized(str(e), "INVALID_TOKEN", scheme)

        subject = claims.get("sub")
        if not subject:
            raise _unauthorized("Token has no subject", "INVALID_TOKEN", scheme)
        return str(subject)

    return get_current_user_id
