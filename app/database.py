"""Database engine construction and schema initialization."""
import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from app.config import Settings

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured DATABASE_URL.

    Connections come from the engine's pool and are returned after each
    request-scoped Session closes.
    """
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(
        settings.DATABASE_URL,
        connect_args=connect_args,
        pool_pre_ping=True,
    )


def init_db(engine: Engine) -> None:
    """Create all tables registered on SQLModel.metadata."""
    # Table models must be imported before create_all
    from app.models.user import User  # noqa: F401
    from app.models.conversation import ChatMessage, ChatSession  # noqa: F401
    from app.models.component import ComponentVersion  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ensured")
