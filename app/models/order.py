"""Order model and its line items.

Orders record what was bought in a registration. Line items are stored as a
JSON list; prices are always integer minor units (cents).
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.registration import Registration

logger = logging.getLogger(__name__)


def _stored_amount(value) -> int:
    """Read a stored quantity or price; unreadable or negative values count as 0."""
    try:
        amount = int(value or 0)
    except (TypeError, ValueError):
        amount = -1
    if amount < 0:
        logger.warning(f"Ignoring invalid stored order value: {value!r}")
        return 0
    return amount

@dataclass(frozen=True)
class OrderLineItem:
    """One ticket type within an order."""

    ticket_title: str
    quantity: int
    unit_price: int

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError("Line item quantity cannot be negative")
        if self.unit_price < 0:
            raise ValueError("Line item price cannot be negative")

    @property
    def amount(self) -> int:
        return self.unit_price * self.quantity

    @classmethod
    def from_raw(cls, raw: dict) -> "OrderLineItem":
        """Build from a stored item, accepting older key spellings.

        Orders are validated when written; a bad value in an already stored
        item is read as 0 so the rest of the registration can still be used.
        """
        return cls(
            ticket_title=str(raw.get("ticketTitle") or raw.get("title") or ""),
            quantity=_stored_amount(raw.get("quantity")),
            unit_price=_stored_amount(raw.get("unitPrice", raw.get("price"))),
        )

    def to_raw(self) -> dict:
        return {
            "ticketTitle": self.ticket_title,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
        }


class Order(SQLModel, table=True):
    """A paid (or free) order belonging to a registration.

    Attributes:
        id: Unique identifier (UUID).
        registration_id: Foreign key to the Registration.
        items: JSON list of ``{ticketTitle, quantity, unitPrice}``.
        total_amount: Amount actually charged, tax included, in minor units.
        currency: ISO currency code.
    """
    __tablename__ = "orders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    registration_id: UUID = Field(foreign_key="registration.id", index=True)
    items: list = Field(default_factory=list, sa_column=Column(JSON))
    total_amount: int | None = None
    currency: str = Field(default="USD")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    registration: Optional["Registration"] = Relationship(back_populates="orders")

    @property
    def line_items(self) -> list[OrderLineItem]:
        return [OrderLineItem.from_raw(item) for item in self.items or []]
