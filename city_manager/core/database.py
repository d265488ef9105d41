"""
MongoDB connection lifecycle.

A single Motor client is shared by the whole process. It is opened by the
application lifespan and closed on shutdown; request handlers never reconnect.
"""

import logging
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from city_manager.core.config import get_settings

logger = logging.getLogger(__name__)


def _client_kwargs(uri: str) -> dict:
    """TLS CA bundle for Atlas / ssl URIs."""
    if "mongodb+srv://" in uri or "ssl=true" in uri.lower() or "tls=true" in uri.lower():
        return {"tlsCAFile": certifi.where()}
    return {}


class Database:
    """MongoDB database connection manager."""
    
    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None
    
    @classmethod
    async def connect(cls, uri: Optional[str] = None, db_name: Optional[str] = None):
        """Connect to MongoDB."""
        settings = get_settings()
        uri = uri or settings.MONGO_URI
        db_name = db_name or settings.MONGO_DB_NAME

        cls.client = AsyncIOMotorClient(uri, **_client_kwargs(uri))
        cls.db = cls.client[db_name]
        logger.info(f"Connected to MongoDB: {db_name}")
    
    @classmethod
    async def disconnect(cls):
        """Disconnect from MongoDB."""
        if cls.client:
            cls.client.close()
            logger.info("Disconnected from MongoDB")
        cls.client = None
        cls.db = None
    
    @classmethod
    def get_collection(cls, name: str):
        """Get a collection by name."""
        if cls.db is None:
            raise RuntimeError("Database is not connected")
        return cls.db[name]
