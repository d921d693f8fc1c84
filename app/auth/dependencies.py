"""
FastAPI dependencies for Auth system.

Provides the configured identity provider and the dependency that
resolves the caller's user id.
"""

from functools import lru_cache

from common.auth import AuthProvider, JWTAuth, create_auth_dependency

from app.config import settings


@lru_cache()
def get_auth_provider() -> AuthProvider:
    """
    Get the configured authentication provider.

    Raises:
        ValueError: If the provider is unsupported or not configured
    """
    if settings.AUTH_PROVIDER != "jwt":
        raise ValueError(f"Unsupported AUTH_PROVIDER: {settings.AUTH_PROVIDER}")

    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET is required for JWT auth")

    return JWTAuth(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    )


# Usage:
#     @router.get("/protected")
#     async def protected_route(user_id: Annotated[str, Depends(require_auth)]):
#         return {"user_id": user_id}
require_auth = create_auth_dependency(get_auth_provider)
