"""Request/response models for the playground API.

Request bodies accept the camelCase keys the browser client sends
(sessionId, jsxCode, cssCode) as well as snake_case.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Auth

class SignupRequest(BaseModel):
    """Fields are optional here so blanks are reported as 400, not 422."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    user: UserResponse


# Sessions

class SessionCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)


class SessionUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    created_at: datetime
    updated_at: datetime


class SessionEnvelope(BaseModel):
    session: SessionResponse


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    role: str
    content: str
    created_at: datetime


class ComponentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: int
    jsx_code: Optional[str] = None
    css_code: Optional[str] = None
    version: int
    created_at: datetime


class SessionDetail(BaseModel):
    """Session with full message history and latest component (or null)."""
    session: SessionResponse
    messages: list[MessageResponse]
    component: Optional[ComponentResponse] = None


# Chat and components

class ChatRequest(CamelRequest):
    session_id: int = Field(..., alias="sessionId")
    message: str = Field(..., min_length=1)


class ComponentCreate(CamelRequest):
    session_id: int = Field(..., alias="sessionId")
    jsx_code: Optional[str] = Field(default=None, alias="jsxCode")
    css_code: Optional[str] = Field(default=None, alias="cssCode")


class ComponentEnvelope(BaseModel):
    component: ComponentResponse


class ComponentListResponse(BaseModel):
    components: list[ComponentResponse]
