"""Ticket delivery service.

Loads a registration snapshot, composes ticket emails with
``TicketComposer``, renders them and hands them to the mail transport.

Sends are sequential. In individual mode each attendee is handled on its
own: a failure is logged and recorded in the result, and the remaining
attendees are still processed. A group ticket is a single send, so its
failure propagates to the caller. Nothing is retried here.
"""
import logging
from collections.abc import Callable
from uuid import UUID

from sqlmodel import Session

from app.core.config import settings
from app.core.errors import NotFoundError
from app.mail.renderer import TemplateRenderer
from app.mail.transport import MailTransport, OutgoingMail
from app.models import Attendee, Registration
from app.tickets import store
from app.tickets.composer import RecipientMode, TicketComposer, TicketRecipient
from app.tickets.qr import encode_qr_png

logger = logging.getLogger(__name__)


class TicketService:
    """Send ticket emails for registrations and attendees."""

    def __init__(
        self,
        session: Session,
        transport: MailTransport,
        renderer: TemplateRenderer,
        template_name: str = settings.ticket_template,
        qr_encoder: Callable[[str], bytes] = encode_qr_png,
    ):
        self.session = session
        self.transport = transport
        self.renderer = renderer
        self.template_name = template_name
        self.qr_encoder = qr_encoder

    def _load_composer(self, registration: Registration) -> TicketComposer:
        event = store.get_event(self.session, registration.event_id)
        if not event:
            raise NotFoundError("Event not found")

        attendees = store.get_attendees_by_registration(self.session, registration.id)
        if not attendees:
            raise NotFoundError("No attendees found for this registration")

        return TicketComposer(
            registration=registration,
            event=event,
            attendees=attendees,
            extras_purchase=store.get_extras_purchase(self.session, registration.id),
            line_items=store.get_order_line_items(self.session, registration.id),
            order_total=store.get_order_total(self.session, registration.id),
            qr_encoder=self.qr_encoder,
            app_name=settings.app_name,
            default_timezone=settings.default_timezone,
        )

    def _deliver(self, recipient: TicketRecipient) -> dict:
        html = self.renderer.render(self.template_name, recipient.variables)
        sent = self.transport.send(
            OutgoingMail(
                to=recipient.attendee.email,
                subject=recipient.subject,
                html=html,
                attachments=recipient.attachments,
            )
        )
        logger.info(
            f"Sent {recipient.mode.value} ticket to {recipient.attendee.email} "
            f"(attendee {recipient.attendee.id})"
        )
        return {
            "attendee_id": recipient.attendee.id,
            "email": recipient.attendee.email,
            "message_id": sent.message_id,
            "success": True,
        }

    def send_tickets_for_registration(self, registration_id: UUID) -> dict:
        """
        Send tickets for every attendee of a registration.

        Returns a summary with the number of successful and failed emails
        and one result entry per recipient. Raises ``NotFoundError`` before
        sending anything if the registration, its event or its attendees
        are missing.
        """
        registration = store.get_registration(self.session, registration_id)
        if not registration:
            raise NotFoundError("Registration not found")

        composer = self._load_composer(registration)

        if composer.mode is RecipientMode.GROUP:
            result = self._deliver(composer.compose(composer.group_recipient))
            return {
                "registration_id": registration.id,
                "total_attendees": composer.total_tickets,
                "successful_emails": 1,
                "failed_emails": 0,
                "results": [result],
            }

        results = []
        for attendee in composer.recipients():
            try:
                results.append(self._deliver(composer.compose(attendee)))
            except Exception as e:
                logger.error(f"Failed to send ticket to attendee {attendee.id}: {e}")
                results.append({
                    "attendee_id": attendee.id,
                    "email": attendee.email,
                    "error": str(e),
                    "success": False,
                })

        successful = sum(1 for r in results if r["success"])
        return {
            "registration_id": registration.id,
            "total_attendees": len(composer.attendees),
            "successful_emails": successful,
            "failed_emails": len(results) - successful,
            "results": results,
        }

    def send_ticket_for_attendee(self, attendee_id: UUID) -> dict:
        """
        Resend the ticket of a single attendee.

        The group recipient of a group registration gets the group ticket
        again; anyone else gets an individual ticket. Delivery failures
        propagate.
        """
        attendee: Attendee | None = store.get_attendee(self.session, attendee_id)
        if not attendee:
            raise NotFoundError("Attendee not found")

        registration = store.get_registration(self.session, attendee.registration_id)
        if not registration:
            raise NotFoundError("Registration not found")

        composer = self._load_composer(registration)
        result = self._deliver(composer.compose(attendee))
        return {
            "registration_id": registration.id,
            "total_attendees": 1,
            "successful_emails": 1,
            "failed_emails": 0,
            "results": [result],
        }
