"""Generated component version SQLModel definition."""
from datetime import datetime
from typing import Optional

from sqlalchemy import Text, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.common import utc_now


class ComponentVersion(SQLModel, table=True):
    """
    Snapshot of generated component code.

    version starts at 1 and is unique per session; the unique constraint is
    what rejects a concurrent writer that allocated the same number.
    """
    __tablename__ = "component_versions"
    __table_args__ = (
        UniqueConstraint("session_id", "version", name="uq_component_versions_session_version"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="sessions.id", index=True, nullable=False)
    jsx_code: Optional[str] = Field(default=None, sa_type=Text)
    css_code: Optional[str] = Field(default=None, sa_type=Text)
    version: int = Field(ge=1, nullable=False)
    created_at: datetime = Field(default_factory=utc_now)
