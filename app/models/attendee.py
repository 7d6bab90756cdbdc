"""Attendee model for people holding tickets.

Attendees are created when a registration completes. Exactly one attendee
per registration is the primary attendee (the purchaser and main contact).
Each attendee carries the ``qr_uuid`` encoded in their ticket QR code.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.registration import Registration


class Attendee(SQLModel, table=True):
    """A ticket holder within a registration.

    Attributes:
        id: Unique identifier (UUID).
        registration_id: Foreign key to the parent Registration.
        first_name: Given name.
        last_name: Family name.
        email: Where the ticket is delivered.
        phone: Optional contact number, printed on the ticket.
        is_primary: True for the purchaser. The primary attendee receives
            group tickets and the extras QR code.
        ticket_title: Ticket type this attendee holds, matched against
            order line items for per-attendee pricing.
        qr_uuid: Random token embedded in the ticket QR code.
        registration: Reference to the parent Registration object.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    registration_id: UUID = Field(foreign_key="registration.id", index=True)
    first_name: str
    last_name: str = ""
    email: str
    phone: str | None = None
    is_primary: bool = Field(default=False)
    ticket_title: str | None = None
    qr_uuid: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    registration: Optional["Registration"] = Relationship(back_populates="attendees")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
