"""User SQLModel definition.

Models:
- User: Account identity with unique email and bcrypt password hash
"""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from app.models.common import utc_now


class User(SQLModel, table=True):
    """
    User account.

    Email is unique and compared case-sensitively, exactly as stored.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True, index=True, nullable=False)
    password_hash: str = Field(nullable=False)
    name: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now)
