"""Request bodies for the event endpoints."""
from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.event_config import EventConfig


class EventPayload(BaseModel):
    """Create (no ``id``) or update (with ``id``) an event."""

    id: UUID | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    location: str | None = None
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    timezone: str | None = None
    slug: str | None = None
    currency: str | None = None
    tax_type: str | None = None
    tax_amount: int | None = None
    config: EventConfig = Field(default_factory=EventConfig)

    @field_validator("end_datetime", "start_datetime", mode="before")
    @classmethod
    def empty_string_is_none(cls, value):
        # Single-day events are submitted with an empty end date
        return None if value == "" else value

    @field_validator("end_datetime", "start_datetime")
    @classmethod
    def naive_is_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class ExtrasPayload(BaseModel):
    id: UUID | None = None
    name: str = Field(min_length=1)
    description: str | None = None
    price: int = Field(default=0, ge=0)
    currency: str = "USD"
    content: list = Field(default_factory=list)
