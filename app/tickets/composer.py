"""Compose ticket emails for a registration.

A registration either gets one group ticket, sent to the primary attendee
and covering every ticket bought, or one individual ticket per attendee.
Group mode applies when the event did not collect details for every
attendee (``save_all_attendees_details`` is off) or when more tickets were
bought than attendees were named.

Composition is pure: it reads a snapshot of the registration, its event,
attendees, extras and order lines, and returns the subject, attachments and
template variables for each recipient. Rendering and delivery happen in
``app.tickets.service``.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from app.core.errors import NotFoundError
from app.mail.transport import MailAttachment
from app.models import Attendee, Event, ExtrasPurchase, OrderLineItem, Registration
from app.tickets.dateformat import (
    EventSchedule,
    render_event_window,
    render_long_date,
    timezone_abbreviation,
)
from app.tickets.money import currency_symbol
from app.tickets.qr import (
    QR_EXTRAS_CID,
    QR_MAIN_CID,
    attendee_qr_data,
    encode_qr_png,
    extras_qr_data,
)

UNKNOWN = "unknown"


class RecipientMode(str, Enum):
    GROUP = "group"
    INDIVIDUAL = "individual"


@dataclass(frozen=True)
class Pricing:
    """Amounts shown on one ticket email, in minor units."""

    quantity: int
    unit_price: int | None
    subtotal: int
    tax_amount: int
    total_amount: int


@dataclass
class TicketRecipient:
    attendee: Attendee
    mode: RecipientMode
    subject: str
    pricing: Pricing
    attachments: list[MailAttachment]
    variables: dict


@dataclass
class TicketEmailPlan:
    mode: RecipientMode
    total_tickets: int
    recipients: list[TicketRecipient]


class TicketComposer:
    """Build ticket emails for one registration.

    Args:
        registration: The registration being ticketed.
        event: Its event.
        attendees: All attendees of the registration.
        extras_purchase: The registration's extras purchase, if any.
        line_items: Order lines across all of the registration's orders.
        order_total: Amount recorded on the orders, tax included. Defaults
            to the line-item subtotal (no tax).
        qr_encoder: Turns a QR payload string into image bytes.
        app_name: Shown in the email footer.
        default_timezone: Used when the event has no timezone of its own.
    """

    def __init__(
        self,
        registration: Registration,
        event: Event,
        attendees: Sequence[Attendee],
        extras_purchase: ExtrasPurchase | None,
        line_items: Sequence[OrderLineItem],
        order_total: int | None = None,
        qr_encoder: Callable[[str], bytes] = encode_qr_png,
        app_name: str = "",
        default_timezone: str = "UTC",
    ):
        if not attendees:
            raise NotFoundError("No attendees found for this registration")

        self.registration = registration
        self.event = event
        self.attendees = list(attendees)
        self.extras_purchase = extras_purchase
        self.line_items = list(line_items)
        self.order_total = order_total
        self.qr_encoder = qr_encoder
        self.app_name = app_name

        self.config = event.get_config()
        self.schedule = EventSchedule.from_event(event, default_timezone)

        self.total_tickets = sum(item.quantity for item in self.line_items) or 1
        self.has_multiple_ticket_types = (
            len({item.ticket_title for item in self.line_items}) > 1
        )

        if not self.config.save_all_attendees_details or self.total_tickets > len(self.attendees):
            self.mode = RecipientMode.GROUP
        else:
            self.mode = RecipientMode.INDIVIDUAL

        primary = next((a for a in self.attendees if a.is_primary), None)
        self.group_recipient = primary or self.attendees[0]
        # Only one attendee may ever receive the extras QR code
        self.extras_recipient_id = primary.id if primary else None

    def recipients(self) -> list[Attendee]:
        """Attendees that receive an email in this registration's mode."""
        if self.mode is RecipientMode.GROUP:
            return [self.group_recipient]
        return list(self.attendees)

    def plan(self) -> TicketEmailPlan:
        return TicketEmailPlan(
            mode=self.mode,
            total_tickets=self.total_tickets,
            recipients=[self.compose(attendee) for attendee in self.recipients()],
        )

    def compose(self, attendee: Attendee) -> TicketRecipient:
        """Compose the email for one attendee.

        In group mode only the group recipient gets the group ticket; any
        other attendee (e.g. a single resend) is priced individually.
        """
        mode = self.mode
        if mode is RecipientMode.GROUP and attendee.id != self.group_recipient.id:
            mode = RecipientMode.INDIVIDUAL

        if mode is RecipientMode.GROUP:
            pricing, ticket_type = self._group_pricing()
            subject = f"Tickets for {self.event.name}"
        else:
            pricing, ticket_type = self._individual_pricing(attendee)
            subject = f"Ticket for {self.event.name} - {attendee.first_name} {attendee.last_name}"

        attachments = self._attachments(attendee)
        variables = self._variables(attendee, mode, pricing, ticket_type, attachments)
        return TicketRecipient(
            attendee=attendee,
            mode=mode,
            subject=subject,
            pricing=pricing,
            attachments=attachments,
            variables=variables,
        )

    def _group_pricing(self) -> tuple[Pricing, str]:
        subtotal = sum(item.amount for item in self.line_items)
        total_amount = self.order_total if self.order_total is not None else subtotal
        # Free registrations never show tax
        tax_amount = 0 if subtotal == 0 else total_amount - subtotal

        if self.has_multiple_ticket_types or not self.line_items:
            ticket_type, unit_price = UNKNOWN, None
        else:
            ticket_type = self.line_items[0].ticket_title
            unit_price = self.line_items[0].unit_price

        pricing = Pricing(
            quantity=self.total_tickets,
            unit_price=unit_price,
            subtotal=subtotal,
            tax_amount=tax_amount,
            total_amount=total_amount,
        )
        return pricing, ticket_type

    def _individual_pricing(self, attendee: Attendee) -> tuple[Pricing, str]:
        matched = next(
            (item for item in self.line_items if item.ticket_title == attendee.ticket_title),
            None,
        )
        item = matched or (self.line_items[0] if self.line_items else None)
        unit_price = item.unit_price if item else 0

        if matched:
            ticket_type = matched.ticket_title
        elif item and not self.has_multiple_ticket_types:
            ticket_type = item.ticket_title
        else:
            ticket_type = attendee.ticket_title or UNKNOWN

        pricing = Pricing(
            quantity=1,
            unit_price=unit_price,
            subtotal=unit_price,
            tax_amount=0,
            total_amount=unit_price,
        )
        return pricing, ticket_type

    def _has_extras_for(self, attendee: Attendee) -> bool:
        return bool(
            attendee.is_primary
            and attendee.id == self.extras_recipient_id
            and self.extras_purchase is not None
            and self.extras_purchase.extras_data
        )

    def _attachments(self, attendee: Attendee) -> list[MailAttachment]:
        attachments = [
            MailAttachment(
                filename="ticket-qr.png",
                content=self.qr_encoder(
                    attendee_qr_data(attendee.registration_id, attendee.id, attendee.qr_uuid)
                ),
                cid=QR_MAIN_CID,
            )
        ]
        if self._has_extras_for(attendee):
            attachments.append(
                MailAttachment(
                    filename="extras-qr.png",
                    content=self.qr_encoder(
                        extras_qr_data(self.extras_purchase.id, self.extras_purchase.qr_uuid)
                    ),
                    cid=QR_EXTRAS_CID,
                )
            )
        return attachments

    def _variables(
        self,
        attendee: Attendee,
        mode: RecipientMode,
        pricing: Pricing,
        ticket_type: str,
        attachments: list[MailAttachment],
    ) -> dict:
        is_group = mode is RecipientMode.GROUP
        timezone = self.schedule.timezone
        has_extras = any(a.cid == QR_EXTRAS_CID for a in attachments)

        if is_group and ticket_type == UNKNOWN:
            quantity = UNKNOWN
        else:
            quantity = pricing.quantity

        return {
            "app_name": self.app_name,
            "event_name": self.event.name,
            "location": self.event.location or "",
            "name": f"{attendee.first_name} {attendee.last_name}".strip(),
            "email": attendee.email,
            "phone": attendee.phone or "",
            "event_date_display": render_event_window(self.schedule),
            "registration_time": render_long_date(self.registration.created_at, timezone),
            "timezone_abbreviation": timezone_abbreviation(timezone, self.event.start_datetime),
            "is_group_ticket": is_group,
            "ticket_type": ticket_type,
            "quantity": quantity,
            "total_tickets": self.total_tickets if is_group else 1,
            "has_multiple_ticket_types": self.has_multiple_ticket_types,
            "line_items": [
                {
                    "ticket_title": item.ticket_title,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "amount": item.amount,
                }
                for item in self.line_items
            ] if is_group else [],
            "extras_list": list(self.extras_purchase.extras_data) if has_extras else [],
            "currency": self.event.currency,
            "currency_symbol": currency_symbol(self.event.currency) or "",
            "unit_price": pricing.unit_price,
            "subtotal": pricing.subtotal,
            "tax_amount": pricing.tax_amount,
            "total_amount": pricing.total_amount,
            "show_tax": is_group and pricing.tax_amount != 0,
            "qr_main_cid": QR_MAIN_CID,
            "qr_extras_cid": QR_EXTRAS_CID if has_extras else None,
        }


def compose_for_registration(
    registration: Registration,
    event: Event,
    attendees: Sequence[Attendee],
    extras_purchase: ExtrasPurchase | None,
    line_items: Sequence[OrderLineItem],
    **kwargs,
) -> TicketEmailPlan:
    """Classify the registration and compose every recipient's email."""
    return TicketComposer(
        registration, event, attendees, extras_purchase, line_items, **kwargs
    ).plan()
