"""Credential store: password hashing and identity tokens.

- Passwords: bcrypt with a per-call salt
- Tokens: HS256 JWT carrying {id, email, name}, expiring after TOKEN_EXPIRE_DAYS
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

import bcrypt
import jwt
from pydantic import BaseModel
from sqlmodel import Session

from app.config import Settings
from app.services import user_service

logger = logging.getLogger(__name__)


# bcrypt only reads the first 72 bytes; newer releases reject longer input
MAX_PASSWORD_BYTES = 72


class AuthUser(BaseModel):
    """Identity claims carried by a token."""
    id: int
    email: str
    name: Optional[str] = None


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash password with a fresh bcrypt salt.

    Raises:
        ValueError: If the password is longer than MAX_PASSWORD_BYTES
    """
    if password_too_long(password):
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Check password against a stored bcrypt hash.

    Returns False for a mismatch and for a hash bcrypt cannot read.
    """
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(user: AuthUser, settings: Settings) -> str:
    """
    Issue a signed identity token.

    Args:
        user: Claims to embed
        settings: Supplies secret, algorithm and lifetime

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "iat": now,
        "exp": now + timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, settings: Settings) -> Optional[AuthUser]:
    """
    Validate signature and expiry of an identity token.

    Never raises: expired, malformed, wrongly signed tokens and tokens
    missing id/email all come back as None.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None

    if payload.get("id") is None or not payload.get("email"):
        return None

    try:
        return AuthUser(
            id=payload["id"],
            email=payload["email"],
            name=payload.get("name"),
        )
    except ValueError:
        return None


def authenticate_user(session: Session, email: str, password: str) -> Optional[AuthUser]:
    """
    Resolve email + password to identity claims.

    Returns None when the email is unknown or the password does not match.
    """
    user = user_service.get_user_by_email(session, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return AuthUser(id=user.id, email=user.email, name=user.name)
