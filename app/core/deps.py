"""FastAPI dependencies: settings, database session, current user."""
from typing import Iterator

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from app.config import Settings
from app.core.security import AuthUser, verify_token
from app.services.chat_service import ChatService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Request-scoped database session."""
    with Session(request.app.state.engine) as session:
        yield session


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_current_user(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> AuthUser:
    """
    Resolve the caller's identity.

    Reuses the claims the access guard attached; otherwise validates the
    identity cookie directly so routes stay protected without the guard.

    Raises:
        HTTPException: 401 if the cookie is missing or the token is invalid
    """
    auth_user = getattr(request.state, "auth_user", None)
    if auth_user is not None:
        return auth_user

    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    auth_user = verify_token(token, settings)
    if auth_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return auth_user
