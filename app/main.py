"""FastAPI application entry point for the Component Playground API."""
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from app.api.routes.auth import router as auth_router
from app.api.routes.chat import router as chat_router
from app.api.routes.components import router as components_router
from app.api.routes.pages import router as pages_router
from app.api.routes.sessions import router as sessions_router
from app.config import Settings, get_settings
from app.core.errors import ConflictError
from app.core.middleware import AccessGuardMiddleware
from app.database import build_engine, init_db
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    chat_service: Optional[ChatService] = None,
) -> FastAPI:
    """
    Build the application.

    Settings, engine and chat service are created once here and live on
    app.state for the process lifetime; handlers reach them via dependencies.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = engine or build_engine(settings)
    chat_service = chat_service or ChatService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title="Component Playground API",
        description="Chat-driven React component generation with versioned sessions",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.chat_service = chat_service

    # Last added runs outermost, so CORS preflights never hit the guard
    app.add_middleware(AccessGuardMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(sessions_router)
    app.include_router(components_router)
    app.include_router(chat_router)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed or incomplete request bodies are a 400."""
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request body"},
        )

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError):
        logger.warning("Unhandled conflict: %s", exc)
        return JSONResponse(
            status_code=409,
            content={"detail": "Conflict"},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unhandled exceptions with generic error response.

        Internal details are logged, never returned to the client.
        """
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_app()
