"""
Async MongoDB connection for the progress API.

Wraps a Motor client and initialises Beanie on connect. Progress records
are accessed as raw Motor collections, so the document model list is
normally empty.

Example:
    from common.database import MongoDB

    mongo = MongoDB()
    await mongo.connect("mongodb://localhost:27017", "skillshare")
    progress = mongo.db["user_plan_progress"]
    healthy = await mongo.ping()
    await mongo.disconnect()
"""

import logging
from typing import List, Type, Optional

from beanie import init_beanie, Document
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


def _redact(uri: str) -> str:
    # Drop "user:password@" from mongodb:// and mongodb+srv:// URIs
    scheme, sep, rest = uri.partition("://")
    if not sep or "@" not in rest:
        return uri
    return f"{scheme}://{rest.rsplit('@', 1)[1]}"


class MongoDB:
    """Owns one Motor client and the database selected on connect."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._name: Optional[str] = None
        self._ready = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        document_models: Optional[List[Type[Document]]] = None,
    ) -> None:
        """
        Open the client and initialise Beanie.

        Args:
            uri: MongoDB connection string
            database_name: Database holding the progress collection
            document_models: Beanie Document classes, if any

        Raises:
            Exception: Whatever Motor or Beanie raised; the client is closed first
        """
        models = list(document_models or [])
        logger.info(f"Connecting to MongoDB at {_redact(uri)}, database {database_name}")

        client = AsyncIOMotorClient(uri)
        try:
            await init_beanie(database=client[database_name], document_models=models)
        except Exception as e:
            logger.error(f"MongoDB initialisation failed: {e}")
            client.close()
            raise

        self._client = client
        self._name = database_name
        self._ready = True
        logger.info(f"MongoDB ready ({len(models)} document models)")

    async def disconnect(self) -> None:
        if self._client is None:
            return
        self._client.close()
        logger.info(f"Closed MongoDB connection to {self._name}")
        self._client = None
        self._name = None
        self._ready = False

    async def ping(self) -> bool:
        """Round-trip to the server. False when unconnected or unreachable."""
        if not self._ready:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning(f"MongoDB ping failed: {e}")
            return False
        return True

    @property
    def is_connected(self) -> bool:
        return self._ready

    @property
    def database_name(self) -> Optional[str]:
        return self._name

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Motor database handle; raises RuntimeError before connect()."""
        if not self._ready:
            raise RuntimeError("MongoDB is not connected; call connect() first")
        return self._client[self._name]
