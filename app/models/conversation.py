"""Playground session and chat message SQLModel definitions.

Models:
- ChatSession: Named conversation thread owned by one user
- ChatMessage: Individual immutable turn in a session
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel

from app.models.common import utc_now

DEFAULT_SESSION_TITLE = "Untitled Session"


class ChatRole(str, Enum):
    """Chat message role values"""
    USER = "user"
    ASSISTANT = "assistant"


class ChatSession(SQLModel, table=True):
    """
    Playground session.

    Ownership: Each session belongs to exactly one user via user_id.
    All reads and writes MUST filter by (id, user_id).
    updated_at moves forward on every message append, version save and rename.
    """
    __tablename__ = "sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    title: str = Field(default=DEFAULT_SESSION_TITLE, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, index=True)


class ChatMessage(SQLModel, table=True):
    """
    Message in a session.

    Append-only: rows are never updated or deleted.
    Assistant content may embed a JSON component payload.
    """
    __tablename__ = "chat_messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="sessions.id", index=True, nullable=False)
    role: str = Field(max_length=20)  # "user" or "assistant"
    content: str = Field()
    created_at: datetime = Field(default_factory=utc_now)
