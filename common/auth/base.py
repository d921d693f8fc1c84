"""
Identity provider contract.

Routes only ever need the ``sub`` claim of a verified token; how tokens are
minted and checked is up to the provider.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """Token issuer and verifier. Methods are async so providers may do I/O."""

    @abstractmethod
    async def create_token(self, user_id: str, **claims: Any) -> str:
        """Mint a token whose ``sub`` is ``user_id``; extra claims are embedded."""

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Return the token's claims.

        Raises:
            ValueError: Bad signature, expired, or malformed
        """

