"""Ticket routes for sending and resending ticket emails."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.core.config import settings
from app.core.database import get_session
from app.core.errors import TicketingError
from app.core.security import CurrentUser, require_admin
from app.mail.renderer import TemplateRenderer
from app.mail.transport import MailTransport, build_transport
from app.tickets.service import TicketService

router = APIRouter(prefix="/tickets", tags=["tickets"])


def get_mail_transport() -> MailTransport:
    """Dependency providing the configured mail transport."""
    return build_transport(settings)


def get_template_renderer() -> TemplateRenderer:
    return TemplateRenderer()


def get_ticket_service(
    session: Session = Depends(get_session),
    transport: MailTransport = Depends(get_mail_transport),
    renderer: TemplateRenderer = Depends(get_template_renderer),
) -> TicketService:
    return TicketService(session, transport, renderer)


@router.post("/registrations/{registration_id}/send")
async def send_registration_tickets(
    registration_id: UUID,
    current_user: CurrentUser = Depends(require_admin),
    tickets: TicketService = Depends(get_ticket_service),
):
    """
    Send tickets for a registration.

    Sends one group ticket to the primary attendee, or one ticket per
    attendee when every attendee was named at registration. Individual
    failures are reported in the result rather than failing the request.
    """
    try:
        return tickets.send_tickets_for_registration(registration_id)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/attendees/{attendee_id}/send")
async def send_attendee_ticket(
    attendee_id: UUID,
    current_user: CurrentUser = Depends(require_admin),
    tickets: TicketService = Depends(get_ticket_service),
):
    """Resend the ticket of a single attendee."""
    try:
        return tickets.send_ticket_for_attendee(attendee_id)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
