"""
HS256 (or any python-jose algorithm) bearer tokens.

Each token carries ``sub`` (the user id), ``iat`` and ``exp``.

Example:
    auth = JWTAuth(secret=settings.JWT_SECRET, access_token_expire_minutes=60)
    token = await auth.create_token("user_123")
    (await auth.verify_token(token))["sub"]  # "user_123"
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import jwt, JWTError

from common.auth.base import AuthProvider


class JWTAuth(AuthProvider):
    """Issues and verifies signed tokens. Holds no user records."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 30,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = timedelta(minutes=access_token_expire_minutes)

    async def create_token(self, user_id: str, **claims: Any) -> str:
        issued = datetime.now(timezone.utc)
        body = dict(claims)
        body.update(sub=user_id, iat=issued, exp=issued + self._lifetime)
        return jwt.encode(body, self._secret, algorithm=self._algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """Decode and check signature and expiry."""
        try:
            return jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
