"""Extras (add-on products) and their purchases.

Extras are optional add-ons for an event, such as parking or merchandise.
When a registration buys extras, an ExtrasPurchase snapshots what was
bought and gets its own QR code, redeemed separately from the tickets.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.event import Event
    from app.models.registration import Registration


class Extras(SQLModel, table=True):
    """An add-on offered for an event.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the Event.
        name: Display name.
        description: Optional longer text.
        price: Price in minor units.
        currency: ISO currency code.
        content: JSON list describing what the extra includes.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    name: str
    description: str | None = None
    price: int = Field(default=0, ge=0)
    currency: str = Field(default="USD")
    content: list = Field(default_factory=list, sa_column=Column(JSON))

    # Relationship
    event: Optional["Event"] = Relationship(back_populates="extras")


class ExtrasPurchase(SQLModel, table=True):
    """Extras bought within a registration.

    Attributes:
        id: Unique identifier (UUID).
        registration_id: Foreign key to the Registration (one per registration).
        extras_data: JSON snapshot of ``{name, price, content}`` per extra.
        status: True once redeemed at the venue.
        qr_uuid: Random token embedded in the extras QR code.
        scanned_at: When the extras QR code was redeemed.
    """
    __tablename__ = "extras_purchase"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    registration_id: UUID = Field(foreign_key="registration.id", unique=True)
    extras_data: list = Field(default_factory=list, sa_column=Column(JSON))
    status: bool = Field(default=False)
    qr_uuid: UUID = Field(default_factory=uuid4)
    scanned_at: datetime | None = None

    # Relationship
    registration: Optional["Registration"] = Relationship(
        back_populates="extras_purchase"
    )
