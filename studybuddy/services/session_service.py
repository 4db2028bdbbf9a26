import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from studybuddy.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger("session_service")
logging.basicConfig(level=logging.INFO)

DEFAULT_TITLE = "New Chat"
TITLE_MAX_CHARS = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _oid(session_id: str) -> ObjectId:
    try:
        return ObjectId(session_id)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid session id")


def title_from_message(content: str) -> str:
    """First 50 characters of the message, with an ellipsis when cut."""
    title = content[:TITLE_MAX_CHARS]
    return title + "..." if len(content) > TITLE_MAX_CHARS else title


def _session_out(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "title": doc.get("title") or DEFAULT_TITLE,
        "created_at": doc["created_at"],
        "updated_at": doc.get("updated_at"),
    }


def _message_out(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "session_id": str(doc["session_id"]),
        "role": doc["role"],
        "content": doc["content"],
        "created_at": doc["created_at"],
    }


# ---------------- Sessions ----------------
def list_sessions(db: Database, user_id: str) -> List[dict]:
    cur = db.chat_sessions.find({"user_id": user_id}).sort([
        ("updated_at", DESCENDING),
        ("_id", DESCENDING),
    ])
    return [_session_out(s) for s in cur]


def create_session(db: Database, user_id: str, title: str = DEFAULT_TITLE) -> dict:
    now = _now()
    doc = {
        "user_id": user_id,
        "title": title,
        "created_at": now,
        "updated_at": now,
    }
    doc["_id"] = db.chat_sessions.insert_one(doc).inserted_id
    logger.info(f"Created chat session {doc['_id']} for user {user_id}")
    return _session_out(doc)


def get_session(db: Database, user_id: str, session_id: str) -> dict:
    doc = db.chat_sessions.find_one({"_id": _oid(session_id), "user_id": user_id})
    if not doc:
        raise NotFoundError("Chat session not found")
    return doc


def delete_session(db: Database, user_id: str, session_id: str) -> dict:
    """Delete a session and every message in it."""
    doc = get_session(db, user_id, session_id)
    res = db.chat_messages.delete_many({"session_id": doc["_id"], "user_id": user_id})
    db.chat_sessions.delete_one({"_id": doc["_id"], "user_id": user_id})
    logger.info(f"Deleted chat session {doc['_id']} ({res.deleted_count} messages) for user {user_id}")
    return {"deleted": 1, "deleted_messages": int(res.deleted_count)}


# ---------------- Messages ----------------
def list_messages(db: Database, user_id: str, session_id: str) -> List[dict]:
    doc = get_session(db, user_id, session_id)
    cur = db.chat_messages.find({"session_id": doc["_id"], "user_id": user_id}).sort([
        ("created_at", ASCENDING),
        ("_id", ASCENDING),
    ])
    return [_message_out(m) for m in cur]


def save_message(
    db: Database,
    *,
    user_id: str,
    session_id: str,
    role: str,
    content: str,
    created_at: Optional[datetime] = None,
) -> dict:
    """
    Append a message to a session.
    The first user message of a session also becomes its title.
    """
    session = get_session(db, user_id, session_id)
    is_first = db.chat_messages.count_documents({"session_id": session["_id"]}) == 0

    now = created_at or _now()
    doc = {
        "session_id": session["_id"],
        "user_id": user_id,
        "role": role,
        "content": content,
        "created_at": now,
    }
    doc["_id"] = db.chat_messages.insert_one(doc).inserted_id

    update = {"updated_at": now}
    if is_first and role == "user":
        update["title"] = title_from_message(content)
    db.chat_sessions.update_one({"_id": session["_id"]}, {"$set": update})

    return _message_out(doc)


# ---------------- Account cascade ----------------
def delete_user_chats(db: Database, user_id: str) -> dict:
    """Remove every message and session owned by ``user_id``."""
    msgs = db.chat_messages.delete_many({"user_id": user_id})
    sess = db.chat_sessions.delete_many({"user_id": user_id})
    return {"messages": int(msgs.deleted_count), "sessions": int(sess.deleted_count)}
