"""Event rows shown in the "upcoming events" list."""

from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hopecity.models.base import Base


def _new_event_id() -> str:
    return str(uuid.uuid4())


class SiteEvent(Base):
    __tablename__ = "events"

    # Store-assigned; regenerated every time the list is saved
    id: Mapped[str] = mapped_column(sa.String(36), primary_key=True, default=_new_event_id)

    # Free-form labels, not parsed dates
    title: Mapped[str] = mapped_column(sa.String, server_default="")
    date: Mapped[str] = mapped_column(sa.String, server_default="")
    time: Mapped[str] = mapped_column(sa.String, server_default="")
    signup_url: Mapped[str | None] = mapped_column(sa.String, nullable=True)

    # Display order (ascending)
    order_index: Mapped[int] = mapped_column(sa.Integer, default=0, index=True)
