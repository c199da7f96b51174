"""Session, chat message and component version persistence.

Ownership: get_session() is the only authorization check. Callers MUST resolve
the session through it before touching messages or versions, so a session
owned by someone else looks exactly like a missing one.

Each insert is committed on its own, then the session's updated_at is bumped
in a separate statement. A failure between the two leaves updated_at stale
but never reorders messages or versions.
"""
from typing import Optional
import logging

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import ConflictError
from app.models.common import utc_now
from app.models.component import ComponentVersion
from app.models.conversation import DEFAULT_SESSION_TITLE, ChatMessage, ChatRole, ChatSession

logger = logging.getLogger(__name__)


def create_session(
    session: Session,
    user_id: int,
    title: Optional[str] = None,
) -> ChatSession:
    """Create a session owned by user_id."""
    chat_session = ChatSession(user_id=user_id, title=title or DEFAULT_SESSION_TITLE)
    session.add(chat_session)
    session.commit()
    session.refresh(chat_session)
    return chat_session


def get_user_sessions(session: Session, user_id: int) -> list[ChatSession]:
    """List a user's sessions, most recently updated first."""
    statement = select(ChatSession).where(
        ChatSession.user_id == user_id
    ).order_by(ChatSession.updated_at.desc(), ChatSession.id.desc())

    return list(session.exec(statement).all())


def get_session(session: Session, session_id: int, user_id: int) -> Optional[ChatSession]:
    """
    Get session by id, only if owned by user_id.

    Returns:
        ChatSession, or None when absent or owned by another user
    """
    statement = select(ChatSession).where(
        ChatSession.id == session_id,
        ChatSession.user_id == user_id,
    )
    return session.exec(statement).first()


def touch_session(session: Session, session_id: int) -> None:
    """Move the session's updated_at to now."""
    session.exec(
        update(ChatSession)
        .where(ChatSession.id == session_id)
        .values(updated_at=utc_now())
    )
    session.commit()


def update_session_title(session: Session, session_id: int, title: str) -> None:
    session.exec(
        update(ChatSession)
        .where(ChatSession.id == session_id)
        .values(title=title, updated_at=utc_now())
    )
    session.commit()


def add_chat_message(
    session: Session,
    session_id: int,
    role: ChatRole | str,
    content: str,
) -> ChatMessage:
    """
    Append a message, then bump the session timestamp.

    Args:
        session: Database session
        session_id: Owning session (already ownership-checked)
        role: "user" or "assistant"
        content: Message text

    Returns:
        Stored ChatMessage
    """
    message = ChatMessage(
        session_id=session_id,
        role=ChatRole(role).value,
        content=content,
    )
    session.add(message)
    session.commit()
    session.refresh(message)

    touch_session(session, session_id)
    return message


def get_chat_messages(
    session: Session,
    session_id: int,
    limit: Optional[int] = None,
) -> list[ChatMessage]:
    """
    Get messages in chronological order.

    Args:
        limit: Keep only the most recent `limit` messages (still ascending)
    """
    if limit is None:
        statement = select(ChatMessage).where(
            ChatMessage.session_id == session_id
        ).order_by(ChatMessage.created_at, ChatMessage.id)
        return list(session.exec(statement).all())

    statement = select(ChatMessage).where(
        ChatMessage.session_id == session_id
    ).order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).limit(limit)

    return list(reversed(session.exec(statement).all()))


def _next_version(session: Session, session_id: int) -> int:
    statement = select(func.coalesce(func.max(ComponentVersion.version), 0)).where(
        ComponentVersion.session_id == session_id
    )
    return session.exec(statement).one() + 1


def save_component_version(
    session: Session,
    session_id: int,
    jsx_code: Optional[str] = None,
    css_code: Optional[str] = None,
    max_attempts: int = 3,
) -> ComponentVersion:
    """
    Store a new component version as max(version) + 1.

    Two writers can read the same max concurrently. The loser's insert hits
    the (session_id, version) unique constraint, is rolled back and retried
    with a fresh read.

    Raises:
        ConflictError: If every attempt collided
    """
    for attempt in range(1, max_attempts + 1):
        component = ComponentVersion(
            session_id=session_id,
            jsx_code=jsx_code,
            css_code=css_code,
            version=_next_version(session, session_id),
        )
        session.add(component)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning(
                f"Version collision for session={session_id}, "
                f"attempt {attempt}/{max_attempts}"
            )
            continue

        session.refresh(component)
        touch_session(session, session_id)

        logger.info(f"Component version saved: session={session_id}, version={component.version}")
        return component

    raise ConflictError(f"Could not allocate a component version for session {session_id}")


def get_latest_component_version(session: Session, session_id: int) -> Optional[ComponentVersion]:
    statement = select(ComponentVersion).where(
        ComponentVersion.session_id == session_id
    ).order_by(ComponentVersion.version.desc()).limit(1)

    return session.exec(statement).first()


def get_component_versions(session: Session, session_id: int) -> list[ComponentVersion]:
    """All versions of a session, newest first."""
    statement = select(ComponentVersion).where(
        ComponentVersion.session_id == session_id
    ).order_by(ComponentVersion.version.desc())

    return list(session.exec(statement).all())
