"""Pydantic models for the canonical site configuration.

Attribute names are snake_case; the canonical (persisted and wire) shape is
camelCase, produced with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Links(CamelModel):
    """Named call-to-action URLs.  Keys are fixed; values may be empty."""

    connect_card: str = ""
    prayer_request: str = ""
    giving: str = ""
    baptism: str = ""
    dream_team: str = ""
    directions: str = ""
    youtube: str = ""


class Socials(CamelModel):
    instagram: str = ""
    facebook: str = ""
    youtube: str = ""


class Announcement(CamelModel):
    active: bool = False
    text: str = ""
    link: str = ""


class Event(CamelModel):
    """One entry of the events list.

    ``id`` is a small integer in local-fallback mode and an opaque
    store-assigned string in remote mode.  ``date`` and ``time`` are display
    labels ("Sundays", "6:30 PM"), not parsed values.
    """

    id: int | str | None = None
    title: str = ""
    date: str = ""
    time: str = ""
    signup_url: str = ""

    @field_validator("title", "date", "time", "signup_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class SiteConfiguration(CamelModel):
    links: Links = Links()
    socials: Socials = Socials()
    announcement: Announcement = Announcement()
    events: list[Event] = []

    def to_canonical(self) -> dict:
        """Return the camelCase dict that is persisted and served."""
        return self.model_dump(by_alias=True)


def next_local_event_id(events: list[Event]) -> int:
    """Next integer id for an event added in local-fallback mode."""
    return max([0] + [e.id for e in events if isinstance(e.id, int)]) + 1
