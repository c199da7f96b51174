"""Session routes.

Provides:
- POST /api/protected/sessions - Create session
- GET /api/protected/sessions - List caller's sessions, most recent first
- GET /api/protected/sessions/{id} - Session with messages and latest component
- PATCH /api/protected/sessions/{id} - Rename session
- GET /api/protected/sessions/{id}/components - Version history

A session owned by another user is reported as 404, never 403.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from app.api.schemas import (
    ComponentListResponse,
    ComponentResponse,
    MessageResponse,
    SessionCreate,
    SessionDetail,
    SessionEnvelope,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)
from app.core.deps import get_current_user, get_db
from app.core.security import AuthUser
from app.models.conversation import ChatSession
from app.services import session_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/protected/sessions", tags=["sessions"])


def get_owned_session(session: Session, session_id: int, user: AuthUser) -> ChatSession:
    """
    Load a session the caller owns.

    Raises:
        HTTPException: 404 if session not found or not owned
    """
    chat_session = session_service.get_session(session, session_id, user.id)
    if not chat_session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return chat_session


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SessionEnvelope)
def create_session(
    request: SessionCreate,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> SessionEnvelope:
    chat_session = session_service.create_session(session, current_user.id, request.title)
    logger.info(f"Session created: user={current_user.id}, session={chat_session.id}")
    return SessionEnvelope(session=SessionResponse.model_validate(chat_session))


@router.get("", response_model=SessionListResponse)
def list_sessions(
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> SessionListResponse:
    sessions = session_service.get_user_sessions(session, current_user.id)
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions]
    )


@router.get("/{session_id}", response_model=SessionDetail)
def get_session_detail(
    session_id: int,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> SessionDetail:
    """
    Get session with all messages and its latest component.

    Raises:
        HTTPException: 404 if session not found or not owned
    """
    chat_session = get_owned_session(session, session_id, current_user)

    messages = session_service.get_chat_messages(session, session_id)
    latest = session_service.get_latest_component_version(session, session_id)

    return SessionDetail(
        session=SessionResponse.model_validate(chat_session),
        messages=[MessageResponse.model_validate(m) for m in messages],
        component=ComponentResponse.model_validate(latest) if latest else None,
    )


@router.patch("/{session_id}", response_model=SessionEnvelope)
def rename_session(
    session_id: int,
    request: SessionUpdate,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> SessionEnvelope:
    chat_session = get_owned_session(session, session_id, current_user)

    session_service.update_session_title(session, session_id, request.title)
    session.refresh(chat_session)

    return SessionEnvelope(session=SessionResponse.model_validate(chat_session))


@router.get("/{session_id}/components", response_model=ComponentListResponse)
def list_component_versions(
    session_id: int,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
) -> ComponentListResponse:
    get_owned_session(session, session_id, current_user)

    versions = session_service.get_component_versions(session, session_id)
    return ComponentListResponse(
        components=[ComponentResponse.model_validate(v) for v in versions]
    )
