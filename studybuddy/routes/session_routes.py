from typing import Dict

from fastapi import APIRouter, Depends, Request
from pymongo.database import Database

from studybuddy.database.mongodb import get_db
from studybuddy.models.chat_model import (
    ChatMessageOut,
    ChatSessionOut,
    DeleteResponse,
    MessageListResponse,
    SessionListResponse,
)
from studybuddy.services import session_service
from studybuddy.services.validation import validate_message
from studybuddy.utils.errors import ValidationError
from studybuddy.utils.jwt_handler import require_user

router = APIRouter(prefix="/sessions", tags=["Sessions"])


#---- sidebar list, most recently active first ---#
@router.get("", response_model=SessionListResponse)
def list_sessions(user: Dict[str, str] = Depends(require_user), db: Database = Depends(get_db)):
    return {"sessions": session_service.list_sessions(db, user["user_id"])}


@router.post("", response_model=ChatSessionOut, status_code=201)
def create_session(user: Dict[str, str] = Depends(require_user), db: Database = Depends(get_db)):
    return session_service.create_session(db, user["user_id"])


@router.delete("/{session_id}", response_model=DeleteResponse)
def delete_session(
    session_id: str,
    user: Dict[str, str] = Depends(require_user),
    db: Database = Depends(get_db),
):
    return session_service.delete_session(db, user["user_id"], session_id)


@router.get("/{session_id}/messages", response_model=MessageListResponse)
def list_messages(
    session_id: str,
    user: Dict[str, str] = Depends(require_user),
    db: Database = Depends(get_db),
):
    return {"messages": session_service.list_messages(db, user["user_id"], session_id)}


#---- persist one turn; same rules as a single relay message --#
@router.post("/{session_id}/messages", response_model=ChatMessageOut, status_code=201)
async def save_message(
    session_id: str,
    request: Request,
    user: Dict[str, str] = Depends(require_user),
    db: Database = Depends(get_db),
):
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON in request body")

    result = validate_message(body)
    if not result.ok:
        raise ValidationError(result.error)
    msg = result.messages[0]

    return session_service.save_message(
        db,
        user_id=user["user_id"],
        session_id=session_id,
        role=msg.role,
        content=msg.content,
    )
