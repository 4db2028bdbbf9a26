# studybuddy/database/mongodb.py
import logging
from typing import Optional

from pymongo import MongoClient, ASCENDING, DESCENDING
from pymongo.database import Database

from studybuddy import config

logger = logging.getLogger("mongodb")
logging.basicConfig(level=logging.INFO)

# Single shared client, created on first use
_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        if not config.MONGO_URI:
            raise RuntimeError("MONGO_URI is not set in environment/.env")
        _client = MongoClient(config.MONGO_URI)
    return _client


def get_db() -> Database:
    """Return the shared database object (FastAPI dependency)."""
    return get_client()[config.MONGO_DB]


# ---------------- Indexes ----------------
def ensure_indexes(db: Database) -> None:
    db.chat_sessions.create_index([("user_id", ASCENDING), ("updated_at", DESCENDING)])
    db.chat_messages.create_index([("session_id", ASCENDING), ("created_at", ASCENDING)])
    db.chat_messages.create_index([("user_id", ASCENDING)])
    db.profiles.create_index([("user_id", ASCENDING)], unique=True)
    db.account_deletion_requests.create_index([("token", ASCENDING)], unique=True)
    db.account_deletion_requests.create_index([("user_id", ASCENDING)])
    logger.info("MongoDB indexes ensured")
