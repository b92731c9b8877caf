"""SQLAlchemy model for the singleton site settings row."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hopecity.models.base import Base

SETTINGS_ROW_ID = 1


class SiteSettings(Base):
    """Singleton row holding the announcement, links and socials sections.

    Only one row (``id=1``) is ever created.  Each section is stored as a
    JSON object in the canonical camelCase shape; the event list lives in
    its own table.
    """

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(primary_key=True, default=SETTINGS_ROW_ID)
    announcement: Mapped[dict | None] = mapped_column(sa.JSON, nullable=True)
    links: Mapped[dict | None] = mapped_column(sa.JSON, nullable=True)
    socials: Mapped[dict | None] = mapped_column(sa.JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")
    )
    updated_by: Mapped[str] = mapped_column(
        sa.String(255), server_default="system"
    )
