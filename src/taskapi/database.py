"""MongoDB client lifecycle.

The client owns a connection pool that is safe for concurrent use. It is
created once at startup, verified with a ping, and closed at shutdown.
"""

import logging

from pymongo import AsyncMongoClient

from taskapi.config import Settings
from taskapi.stores.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """Build the pooled client; no connection is made until first use."""
    return AsyncMongoClient(
        settings.mongodb_uri,
        tz_aware=True,
        appname="taskapi",
        serverSelectionTimeoutMS=settings.mongodb_connect_timeout_ms,
        connectTimeoutMS=settings.mongodb_connect_timeout_ms,
    )


async def open_task_store(settings: Settings) -> tuple[AsyncMongoClient, TaskStore]:
    """Connect to MongoDB and return the client with a store bound to it.

    Raises:
        pymongo.errors.PyMongoError: if the server cannot be reached.
    """
    client = create_mongo_client(settings)
    try:
        await client.admin.command("ping")
    except Exception:
        await client.close()
        raise

    logger.info(
        "MongoDB connected",
        extra={
            "database": settings.mongodb_database,
            "collection": settings.mongodb_collection,
        },
    )
    store = TaskStore.from_client(client, settings.mongodb_database, settings.mongodb_collection)
    return client, store


async def close_database(client: AsyncMongoClient) -> None:
    """Close MongoDB connections."""
    await client.close()
    logger.info("MongoDB connection closed")
