"""User persistence operations."""
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import ConflictError
from app.models.user import User

logger = logging.getLogger(__name__)


def create_user(
    session: Session,
    email: str,
    password_hash: str,
    name: Optional[str] = None,
) -> User:
    """
    Insert a new user.

    Raises:
        ConflictError: If the email is already registered
    """
    user = User(email=email, password_hash=password_hash, name=name)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(f"User already exists with email {email}") from e
    session.refresh(user)
    return user


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def get_user_by_id(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)
