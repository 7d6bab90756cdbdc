"""Event routes for managing events, their configuration and extras."""
from datetime import UTC, date, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from app.core.database import get_session
from app.core.errors import TicketingError
from app.core.security import (
    CurrentUser,
    require_admin,
    require_club_author,
    require_event_author,
)
from app.events import service
from app.events.schemas import EventPayload, ExtrasPayload
from app.models import Event, EventConfig, Extras

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=Event)
async def save_event(
    payload: EventPayload,
    current_user: CurrentUser = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """
    Create or update an event.

    Events without an ``id`` are created for the current user's club. A
    slug is generated from the name unless a custom one is given; custom
    slugs must be unused (400 otherwise).
    """
    try:
        return service.save_event(session, payload, current_user)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("")
async def list_events(
    club_id: int,
    page: int = Query(1, ge=1),
    items_per_page: int = Query(6, ge=1, le=100),
    current_user: CurrentUser = Depends(require_club_author),
    session: Session = Depends(get_session),
):
    """
    List a club's events, paginated.

    Returns the page of events along with the total number of events and
    pages, ordered by start date.
    """
    return service.list_events(session, club_id, page, items_per_page)


@router.get("/active", response_model=list[Event])
async def active_events(
    club_id: int,
    current_date: date | None = None,
    session: Session = Depends(get_session),
):
    """Public list of a club's events that have not finished yet."""
    return service.get_active_events(
        session, club_id, current_date or datetime.now(UTC).date()
    )


@router.get("/slug/{slug}", response_model=Event)
async def event_by_slug(slug: str, session: Session = Depends(get_session)):
    """Public event lookup for registration pages."""
    event = service.get_event_by_slug(session, slug)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/{event_id}", response_model=Event)
async def event_detail(event_id: UUID, session: Session = Depends(get_session)):
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.put("/{event_id}/config", response_model=Event)
async def save_config(
    event_id: UUID,
    config: EventConfig,
    current_user: CurrentUser = Depends(require_event_author),
    session: Session = Depends(get_session),
):
    """
    Replace the event configuration.

    The body is validated into a typed configuration (string booleans such
    as ``"true"`` are accepted) and stored with defaults applied.
    """
    try:
        return service.save_config(session, event_id, config)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{event_id}", response_model=Event)
async def remove_event(
    event_id: UUID,
    current_user: CurrentUser = Depends(require_event_author),
    session: Session = Depends(get_session),
):
    try:
        return service.remove_event(session, event_id, current_user)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{event_id}/extras", response_model=list[Extras])
async def list_extras(event_id: UUID, session: Session = Depends(get_session)):
    """Public list of the extras offered for an event."""
    return service.get_extras_by_event(session, event_id)


@router.post("/{event_id}/extras", response_model=Extras)
async def save_extras(
    event_id: UUID,
    payload: ExtrasPayload,
    current_user: CurrentUser = Depends(require_event_author),
    session: Session = Depends(get_session),
):
    """Create an extra, or update it when the body carries an existing id."""
    return service.upsert_extras(session, event_id, payload)


@router.delete("/{event_id}/extras/{extras_id}", response_model=Extras)
async def remove_extras(
    event_id: UUID,
    extras_id: UUID,
    current_user: CurrentUser = Depends(require_event_author),
    session: Session = Depends(get_session),
):
    try:
        return service.remove_extras(session, event_id, extras_id)
    except TicketingError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
