"""Event model for ticketed events.

This module defines the Event model, the central entity that organizations
create and attendees register for. An event owns its registrations, the
purchasable extras, and a JSON configuration blob that is parsed into a
typed ``EventConfig`` on access.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

from app.models.event_config import EventConfig

if TYPE_CHECKING:
    from app.models.extras import Extras
    from app.models.registration import Registration


class Event(SQLModel, table=True):
    """An event that attendees register for.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name, also the source for the generated slug.
        description: Free-form description.
        location: Venue shown on tickets.
        start_datetime: When the event starts. May be unset ("Date TBA").
        end_datetime: When the event ends. Null for single-day events.
        timezone: IANA timezone name used to render dates. Falls back to
            ``settings.default_timezone`` when unset.
        banner: Stored banner image filename.
        slug: URL-friendly unique identifier.
        currency: ISO currency code for all prices of this event.
        tax_type: Tax mode label as entered by the organizer.
        tax_amount: Tax value as entered by the organizer.
        club_id: Owning organization.
        created_by: User id of the creator.
        registration_count: Number of completed registrations.
        config: Raw configuration blob; use ``get_config()`` to read it.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    description: str | None = None
    location: str | None = None
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    timezone: str | None = None
    banner: str | None = None
    slug: str = Field(index=True, unique=True)
    currency: str = Field(default="USD")
    tax_type: str | None = None
    tax_amount: int | None = None
    club_id: int = Field(index=True)
    created_by: int | None = None
    registration_count: int = Field(default=0)
    config: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    registrations: list["Registration"] = Relationship(back_populates="event")
    extras: list["Extras"] = Relationship(back_populates="event")

    def get_config(self) -> EventConfig:
        """Return the typed configuration with defaults applied."""
        return EventConfig.from_raw(self.config)
