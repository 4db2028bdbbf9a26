"""
Account profile and account deletion.

Deletion runs in a fixed order: chat messages, chat sessions, profile, and
last the user at the identity provider. A confirmed email request also
clears the user's pending deletion requests before the identity step.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from urllib.parse import urlencode

import httpx
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from studybuddy import config
from studybuddy.services.identity_service import delete_auth_user
from studybuddy.utils.errors import GoneError, NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger("account_service")
logging.basicConfig(level=logging.INFO)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # MongoDB hands datetimes back without tzinfo; they are stored as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# ---------------- Profile ----------------
def get_or_create_profile(db: Database, user: Dict[str, str]) -> dict:
    doc = db.profiles.find_one_and_update(
        {"user_id": user["user_id"]},
        {"$setOnInsert": {
            "user_id": user["user_id"],
            "email": user.get("email") or "",
            "created_at": _now(),
        }},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return {"user_id": doc["user_id"], "email": doc.get("email", ""), "created_at": doc["created_at"]}


# ---------------- Deletion ----------------
def _delete_step(label: str, fn) -> int:
    try:
        res = fn()
    except PyMongoError as e:
        logger.error(f"Error deleting {label}: {e}")
        raise UpstreamError(f"Failed to delete {label}")
    return int(res.deleted_count)


def _delete_user_data(db: Database, user_id: str) -> None:
    n = _delete_step("chat messages", lambda: db.chat_messages.delete_many({"user_id": user_id}))
    logger.info(f"Deleted {n} chat messages for user {user_id}")
    n = _delete_step("chat sessions", lambda: db.chat_sessions.delete_many({"user_id": user_id}))
    logger.info(f"Deleted {n} chat sessions for user {user_id}")
    _delete_step("profile", lambda: db.profiles.delete_many({"user_id": user_id}))
    logger.info(f"Deleted profile for user {user_id}")


def delete_account(
    db: Database,
    user_id: str,
    transport: Optional[httpx.BaseTransport] = None,
) -> dict:
    logger.info(f"Starting account deletion for user {user_id}")
    _delete_user_data(db, user_id)
    delete_auth_user(user_id, transport=transport)
    logger.info(f"Successfully deleted user account {user_id}")
    return {"success": True, "message": "Account deleted successfully"}


def send_deletion_confirmation(user_id: str, email: str, confirmation_url: str) -> None:
    """Hand the confirmation link to the mail service (delivery is external)."""
    logger.info(f"Deletion confirmation link issued for user {user_id}")


def request_account_deletion(db: Database, user: Dict[str, str]) -> dict:
    user_id = user["user_id"]
    now = _now()
    pending = [
        r for r in db.account_deletion_requests.find({"user_id": user_id, "confirmed_at": None})
        if _as_utc(r["expires_at"]) > now
    ]
    if pending:
        logger.info(f"User {user_id} already has a pending deletion request, issuing a new one")

    token = secrets.token_urlsafe(32)
    doc = {
        "user_id": user_id,
        "email": user.get("email") or "",
        "token": token,
        "created_at": now,
        "expires_at": now + timedelta(minutes=config.DELETION_TOKEN_TTL_MINUTES),
        "confirmed_at": None,
    }
    try:
        db.account_deletion_requests.insert_one(doc)
    except PyMongoError as e:
        logger.error(f"Error creating deletion request: {e}")
        raise UpstreamError("Failed to create deletion request")

    confirmation_url = f"{config.APP_URL}/Confirm_Deletion?{urlencode({'token': token})}"
    send_deletion_confirmation(user_id, doc["email"], confirmation_url)

    return {"success": True, "message": "Confirmation email sent. Please check your inbox."}


def confirm_account_deletion(
    db: Database,
    token: Optional[str],
    transport: Optional[httpx.BaseTransport] = None,
) -> dict:
    if not token or not isinstance(token, str):
        raise ValidationError("Token is required")

    req = db.account_deletion_requests.find_one({"token": token, "confirmed_at": None})
    if not req:
        logger.warning("Deletion request not found for presented token")
        raise NotFoundError("Invalid or expired confirmation link")

    if _as_utc(req["expires_at"]) < _now():
        logger.warning(f"Deletion token for user {req['user_id']} expired at {req['expires_at']}")
        raise GoneError("This confirmation link has expired. Please request a new one.")

    user_id = req["user_id"]
    logger.info(f"Starting confirmed account deletion for user {user_id}")
    db.account_deletion_requests.update_one({"_id": req["_id"]}, {"$set": {"confirmed_at": _now()}})

    _delete_user_data(db, user_id)

    try:
        db.account_deletion_requests.delete_many({"user_id": user_id})
    except PyMongoError as e:
        # the account itself still goes
        logger.error(f"Error deleting deletion requests for user {user_id}: {e}")

    delete_auth_user(user_id, transport=transport)
    logger.info(f"Successfully deleted user account {user_id}")
    return {"success": True, "message": "Account deleted successfully"}
