"""
MongoDB connection

This module centralizes access to the document store:
- one MongoClient per process (pymongo pools connections internally)
- FastAPI dependency returning the configured database
- command logging outside production

Usage:
    @router.get("/items")
    def read_items(db: Database = Depends(get_db)):
        ...
"""
import logging
from typing import Optional

from pymongo import MongoClient, monitoring
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import settings

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "shop"

_client: Optional[MongoClient] = None


class CommandLogger(monitoring.CommandListener):
    """Log every command sent to MongoDB at DEBUG level"""

    def started(self, event):
        logger.debug(
            f"mongo {event.command_name} db={event.database_name} "
            f"request_id={event.request_id} command={event.command}"
        )

    def succeeded(self, event):
        logger.debug(
            f"mongo {event.command_name} succeeded request_id={event.request_id} "
            f"in {event.duration_micros}us"
        )

    def failed(self, event):
        logger.debug(
            f"mongo {event.command_name} failed request_id={event.request_id} "
            f"in {event.duration_micros}us: {event.failure}"
        )


def get_client() -> MongoClient:
    """Return the process-wide MongoClient, creating it on first use"""
    global _client
    if _client is None:
        listeners = [] if settings.is_production else [CommandLogger()]
        _client = MongoClient(
            settings.MONGODB_URL,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            tz_aware=True,
            event_listeners=listeners,
        )
    return _client


def get_database() -> Database:
    """Database from MONGODB_DATABASE, else the one named in MONGODB_URL"""
    client = get_client()
    if settings.MONGODB_DATABASE:
        return client[settings.MONGODB_DATABASE]
    return client.get_default_database(default=DEFAULT_DATABASE)


def get_collection(name: str) -> Collection:
    return get_database()[name]


def get_db() -> Database:
    """FastAPI dependency for the configured database"""
    return get_database()


def ping() -> bool:
    """True when the server answers a ping; never raises"""
    try:
        get_client().admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def connect() -> bool:
    """
    Open the connection at startup.

    A failed connection is logged and the service keeps starting; the health
    endpoints report DOWN until MongoDB becomes reachable.
    """
    try:
        get_client().admin.command("ping")
    except PyMongoError as e:
        logger.error(f"MongoDB connection error. Please make sure MongoDB is running. {e}")
        return False

    logger.info("MongoDB connected!")
    return True


def close() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB connection closed")
