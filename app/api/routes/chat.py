"""Chat endpoint for component generation.

Provides:
- POST /api/protected/chat - Send message, stream the assistant's reply
"""
from typing import AsyncIterator, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from openai import OpenAIError
from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.api.routes.sessions import get_owned_session
from app.api.schemas import ChatRequest
from app.core.deps import get_chat_service, get_current_user, get_db
from app.core.errors import StoreError
from app.core.security import AuthUser
from app.models.conversation import ChatRole
from app.services import session_service
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/protected", tags=["chat"])


def _prepare_turn(
    session: Session,
    chat_service: ChatService,
    user: AuthUser,
    request: ChatRequest,
) -> list[dict[str, str]]:
    """
    Check ownership, store the user's message and build the prompt.

    Raises:
        HTTPException: 404 if session not found or not owned (nothing stored)
    """
    get_owned_session(session, request.session_id, user)

    session_service.add_chat_message(session, request.session_id, ChatRole.USER, request.message)

    history = session_service.get_chat_messages(
        session, request.session_id, limit=chat_service.settings.CHAT_HISTORY_LIMIT
    )
    latest = session_service.get_latest_component_version(session, request.session_id)
    return chat_service.build_messages(history, latest)


def _record_reply(
    engine: Engine,
    chat_service: ChatService,
    session_id: int,
    text: str,
) -> Optional[int]:
    """Persist the finished reply on a fresh session; returns the new version, if any."""
    with Session(engine) as session:
        _, component = chat_service.record_reply(session, session_id, text)
        return component.version if component else None


@router.post("/chat")
async def send_chat_message(
    request: ChatRequest,
    http_request: Request,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """
    Send a message and stream the model's reply as plain text.

    Flow:
    1. Verify session ownership
    2. Store user message
    3. Load last 10 messages + latest component
    4. Open streaming completion
    5. Relay deltas in arrival order
    6. On completion, store assistant message; save a component version
       if the reply carries a JSX payload

    Raises:
        HTTPException: 404 if session not found or not owned
        HTTPException: 500 if the completion service fails to start
    """
    messages = await run_in_threadpool(
        _prepare_turn, session, chat_service, current_user, request
    )

    try:
        stream = await chat_service.open_stream(messages)
    except OpenAIError as e:
        logger.error(f"Completion service error for session {request.session_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    engine = http_request.app.state.engine
    session_id = request.session_id

    async def body() -> AsyncIterator[str]:
        parts: list[str] = []
        try:
            async for delta in chat_service.relay(stream, http_request.is_disconnected):
                parts.append(delta)
                yield delta
        except OpenAIError as e:
            logger.error(f"Completion stream failed for session {session_id}: {str(e)}")
            return

        if await http_request.is_disconnected():
            logger.info(f"Client left session {session_id} mid-reply, reply not stored")
            return

        try:
            version = await run_in_threadpool(
                _record_reply, engine, chat_service, session_id, "".join(parts)
            )
        except StoreError as e:
            logger.warning(f"Reply for session {session_id} stored without component: {str(e)}")
            return

        if version is not None:
            logger.info(f"Chat turn produced component version {version} for session {session_id}")

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")
