"""Component version routes.

Provides:
- POST /api/protected/components - Save a component version explicitly
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from app.api.routes.sessions import get_owned_session
from app.api.schemas import ComponentCreate, ComponentEnvelope, ComponentResponse
from app.config import Settings
from app.core.deps import get_app_settings, get_current_user, get_db
from app.core.errors import ConflictError
from app.core.security import AuthUser
from app.services import session_service

router = APIRouter(prefix="/api/protected/components", tags=["components"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ComponentEnvelope)
def save_component(
    request: ComponentCreate,
    current_user: AuthUser = Depends(get_current_user),
    session: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ComponentEnvelope:
    """
    Save code the client already extracted from a completed chat turn.

    Raises:
        HTTPException: 404 if session not found or not owned
        HTTPException: 409 if a version number could not be allocated
    """
    get_owned_session(session, request.session_id, current_user)

    try:
        component = session_service.save_component_version(
            session,
            request.session_id,
            request.jsx_code,
            request.css_code,
            max_attempts=settings.VERSION_SAVE_ATTEMPTS,
        )
    except ConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Component version conflict, please retry",
        ) from e

    return ComponentEnvelope(component=ComponentResponse.model_validate(component))
