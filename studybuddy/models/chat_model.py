# models/chat_model.py
from pydantic import BaseModel
from typing import Literal, List, Optional
from datetime import datetime

Role = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str


class ChatMessageOut(BaseModel):
    id: str
    session_id: str
    role: Role
    content: str
    created_at: datetime


class ChatSessionOut(BaseModel):
    id: str
    title: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class SessionListResponse(BaseModel):
    sessions: List[ChatSessionOut]


class MessageListResponse(BaseModel):
    messages: List[ChatMessageOut]


class DeleteResponse(BaseModel):
    deleted: int
    deleted_messages: int = 0
