"""Registration model.

A registration is one checkout for an event. It owns the attendees it
named, the orders that were paid, and at most one extras purchase.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.attendee import Attendee
    from app.models.event import Event
    from app.models.extras import ExtrasPurchase
    from app.models.order import Order


class Registration(SQLModel, table=True):
    """A completed or pending registration for an event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the Event.
        status: True once payment (if any) has completed.
        created_at: When the registration was made. Shown on tickets.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    status: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="registrations")
    attendees: list["Attendee"] = Relationship(back_populates="registration")
    orders: list["Order"] = Relationship(back_populates="registration")
    extras_purchase: Optional["ExtrasPurchase"] = Relationship(
        back_populates="registration",
        sa_relationship_kwargs={"uselist": False},
    )
