# studentdesk/db/database.py
"""
MongoDB connection for the record store.

The lifespan handler in studentdesk.main calls connect_to_mongo() on startup and
close_mongo_connection() on shutdown; crud reaches the database through get_database().
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import motor.motor_asyncio
from pymongo.errors import PyMongoError

from studentdesk.core.config import MONGODB_URL, DB_NAME, MONGODB_TLS

logger = logging.getLogger(__name__)

# students holds the records, counters the next-id sequence
EXPECTED_COLLECTIONS = ["students", "counters"]

SERVER_SELECTION_TIMEOUT_MS = 10000
MAX_POOL_SIZE = 10

_client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None
_db: Optional[motor.motor_asyncio.AsyncIOMotorDatabase] = None


def _reset() -> None:
    global _client, _db
    _client = None
    _db = None


async def connect_to_mongo() -> bool:
    """Opens the client and pings the server. Returns False if the store cannot reach MongoDB."""
    global _client, _db
    if _db is not None:
        return True
    if not MONGODB_URL:
        logger.error("MONGODB_URL is not configured; the student database is unavailable.")
        return False

    client = None
    try:
        # Invalid URLs raise here, before any network traffic
        client = motor.motor_asyncio.AsyncIOMotorClient(
            MONGODB_URL,
            tls=MONGODB_TLS,
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
            maxPoolSize=MAX_POOL_SIZE,
        )
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error(f"Student database '{DB_NAME}' is unreachable: {e}", exc_info=True)
        if client is not None:
            client.close()
        _reset()
        return False

    _client = client
    _db = client[DB_NAME]
    logger.info(f"Student records stored in MongoDB database '{DB_NAME}'")
    return True


async def close_mongo_connection() -> None:
    if _client is not None:
        _client.close()
        logger.info("Student database connection closed.")
    _reset()


def get_database() -> Optional[motor.motor_asyncio.AsyncIOMotorDatabase]:
    return _db


def _missing_collections(existing: List[str]) -> List[str]:
    return [name for name in EXPECTED_COLLECTIONS if name not in existing]


async def check_database_health() -> Dict[str, Any]:
    """
    Reports on the student database for /health and /readyz.

    status is OK when the server answers and both collections exist, WARNING when a
    collection is missing (they are created on first write), and ERROR otherwise.
    """
    report: Dict[str, Any] = {
        "status": "ERROR",
        "connected": False,
        "database": DB_NAME,
        "collections": [],
        "missing_collections": list(EXPECTED_COLLECTIONS),
        "error": None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if _db is None:
        report["error"] = "Student database is not connected"
        return report

    try:
        await _db.client.admin.command("ping")
        collections = await _db.list_collection_names()
    except PyMongoError as e:
        logger.error(f"Student database health check failed: {e}")
        report["error"] = str(e)
        return report

    missing = _missing_collections(collections)
    report.update({
        "status": "WARNING" if missing else "OK",
        "connected": True,
        "collections": collections,
        "missing_collections": missing,
    })
    if missing:
        logger.warning(f"Student database has no {', '.join(missing)} collection yet")
    return report
