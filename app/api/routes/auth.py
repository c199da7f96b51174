"""Authentication routes.

Provides:
- POST /api/auth/signup - Create account and set identity cookie
- POST /api/auth/login - Verify credentials and set identity cookie
- POST /api/auth/logout - Clear identity cookie
- GET /api/auth/me - Claims of the current identity
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from app.api.schemas import AuthResponse, LoginRequest, SignupRequest, UserResponse
from app.config import Settings
from app.core.deps import get_app_settings, get_current_user, get_db
from app.core.errors import ConflictError
from app.core.security import (
    MAX_PASSWORD_BYTES,
    AuthUser,
    authenticate_user,
    create_access_token,
    hash_password,
    password_too_long,
)
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(
    auth_user: AuthUser,
    message: str,
    settings: Settings,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """JSON body with the user, plus the httpOnly identity cookie."""
    body = AuthResponse(message=message, user=UserResponse(**auth_user.model_dump()))
    response = JSONResponse(status_code=status_code, content=body.model_dump())
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=create_access_token(auth_user, settings),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.cookie_max_age,
    )
    return response


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def signup(
    request: SignupRequest,
    session: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """
    Create a user account.

    Raises:
        HTTPException: 400 if email or password missing, or password too long
        HTTPException: 409 if email already registered
    """
    if not request.email or not request.email.strip() or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    if password_too_long(request.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes",
        )

    if user_service.get_user_by_email(session, request.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this email",
        )

    password_hash = hash_password(request.password, rounds=settings.BCRYPT_ROUNDS)
    try:
        user = user_service.create_user(session, request.email, password_hash, request.name)
    except ConflictError:
        # Lost a race with a concurrent signup for the same email
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this email",
        )

    logger.info(f"User signed up: user={user.id}")
    auth_user = AuthUser(id=user.id, email=user.email, name=user.name)
    return _auth_response(
        auth_user, "Account created successfully", settings, status.HTTP_201_CREATED
    )


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    session: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """
    Log in with email and password.

    Raises:
        HTTPException: 400 if email or password missing
        HTTPException: 401 if credentials do not match
    """
    if not request.email or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    auth_user = authenticate_user(session, request.email, request.password)
    if auth_user is None:
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    logger.info(f"User logged in: user={auth_user.id}")
    return _auth_response(auth_user, "Logged in successfully", settings)


@router.post("/logout")
def logout(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return response


@router.get("/me", response_model=UserResponse)
def me(current_user: AuthUser = Depends(get_current_user)) -> UserResponse:
    return UserResponse(**current_user.model_dump())
