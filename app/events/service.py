"""Event management: slugs, saving, listing and extras."""
import logging
import math
import re
from datetime import UTC, date, datetime, time
from uuid import UUID, uuid4

from sqlmodel import Session, col, func, or_, select

from app.core.config import settings
from app.core.errors import AccessDeniedError, NotFoundError, SlugConflictError
from app.core.security import CurrentUser
from app.events.schemas import EventPayload, ExtrasPayload
from app.models import Event, EventConfig, Extras, ExtrasPurchase

logger = logging.getLogger(__name__)


def generate_slug(name: str | None) -> str:
    """
    Build a URL-friendly slug from an event name.

    "Spring Gala 2025!" -> "spring-gala-2025"
    """
    if not name:
        return ""
    slug = name.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_slug_unique(session: Session, slug: str, exclude_id: UUID | None = None) -> bool:
    statement = select(Event.id).where(Event.slug == slug)
    if exclude_id:
        statement = statement.where(Event.id != exclude_id)
    return session.exec(statement).first() is None


def generate_unique_slug(session: Session, name: str, exclude_id: UUID | None = None) -> str:
    """Slug from ``name``, suffixed with -1, -2, ... until unused."""
    base_slug = generate_slug(name) or "event"
    slug = base_slug
    counter = 1
    while not is_slug_unique(session, slug, exclude_id):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def get_event_for_club(session: Session, event_id: UUID, current_user: CurrentUser) -> Event:
    """Fetch an event the current user may manage."""
    event = session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    if not current_user.is_sudo and event.club_id != current_user.club_id:
        raise AccessDeniedError("Access denied")
    return event


def save_event(session: Session, payload: EventPayload, current_user: CurrentUser) -> Event:
    """
    Create or update an event.

    Updates are only allowed for sudo users or members of the owning club.
    A custom slug must be unused; without one, a unique slug is generated
    from the name when the event is created.
    """
    if payload.id:
        event = session.get(Event, payload.id)
        if event is None:
            if not current_user.is_sudo:
                raise AccessDeniedError("Access denied")
        elif not current_user.is_sudo and event.club_id != current_user.club_id:
            raise AccessDeniedError("Access denied")
    else:
        event = None

    creating = event is None
    if creating:
        event = Event(
            id=payload.id or uuid4(),
            name=payload.name,
            slug="",
            club_id=current_user.club_id,
            created_by=current_user.id,
            registration_count=0,
        )

    custom_slug = (payload.slug or "").strip()
    if custom_slug and custom_slug != event.slug:
        if not is_slug_unique(session, custom_slug, event.id):
            raise SlugConflictError("Slug already exists. Please choose a different one.")
        event.slug = custom_slug
    elif creating:
        event.slug = generate_unique_slug(session, payload.name, event.id)

    event.name = payload.name
    event.description = payload.description
    event.location = payload.location
    event.start_datetime = payload.start_datetime
    event.end_datetime = payload.end_datetime
    event.timezone = payload.timezone
    event.currency = payload.currency or settings.default_currency
    event.tax_type = payload.tax_type
    event.tax_amount = payload.tax_amount
    event.config = payload.config.to_json()

    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"{'Created' if creating else 'Updated'} event {event.id} ({event.slug})")
    return event


def save_config(session: Session, event_id: UUID, config: EventConfig) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    event.config = config.to_json()
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def get_event_by_slug(session: Session, slug: str) -> Event | None:
    return session.exec(select(Event).where(Event.slug == slug)).first()


def list_events(
    session: Session,
    club_id: int,
    page: int = 1,
    items_per_page: int = 6,
) -> dict:
    """One page of a club's events, ordered by start date."""
    page = max(page, 1)
    total_items = session.exec(
        select(func.count()).select_from(Event).where(Event.club_id == club_id)
    ).one()

    statement = (
        select(Event)
        .where(Event.club_id == club_id)
        .order_by(Event.start_datetime)
        .offset((page - 1) * items_per_page)
        .limit(items_per_page)
    )
    return {
        "items": list(session.exec(statement).all()),
        "total_items": total_items,
        "page": page,
        "items_per_page": items_per_page,
        "total_pages": math.ceil(total_items / items_per_page) if items_per_page else 0,
    }


def get_active_events(session: Session, club_id: int, current_date: date) -> list[Event]:
    """
    Events that are not over yet.

    Multi-day events are active until their end; single-day events (no
    end) until the end of their start day.
    """
    day_start = datetime.combine(current_date, time.min, tzinfo=UTC)
    statement = (
        select(Event)
        .where(Event.club_id == club_id)
        .where(
            or_(
                (col(Event.end_datetime).is_not(None)) & (col(Event.end_datetime) > day_start),
                (col(Event.end_datetime).is_(None)) & (col(Event.start_datetime) >= day_start),
            )
        )
        .order_by(Event.start_datetime)
    )
    return list(session.exec(statement).all())


def increase_registration_count(session: Session, event_id: UUID) -> Event:
    event = session.get(Event, event_id)
    if not event:
        raise NotFoundError("Event not found")
    event.registration_count += 1
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def remove_event(session: Session, event_id: UUID, current_user: CurrentUser) -> Event:
    event = get_event_for_club(session, event_id, current_user)
    for extras in list(event.extras):
        session.delete(extras)
    session.delete(event)
    session.commit()
    logger.info(f"Removed event {event_id}")
    return event


def upsert_extras(session: Session, event_id: UUID, payload: ExtrasPayload) -> Extras:
    """Create an extra, or update it in place when ``payload.id`` exists."""
    extras = session.get(Extras, payload.id) if payload.id else None
    if extras is None:
        extras = Extras(id=payload.id or uuid4(), event_id=event_id, name=payload.name)

    extras.event_id = event_id
    extras.name = payload.name
    extras.description = payload.description
    extras.price = payload.price
    extras.currency = payload.currency
    extras.content = payload.content

    session.add(extras)
    session.commit()
    session.refresh(extras)
    return extras


def get_extras_by_event(session: Session, event_id: UUID) -> list[Extras]:
    return list(session.exec(select(Extras).where(Extras.event_id == event_id)).all())


def remove_extras(session: Session, event_id: UUID, extras_id: UUID) -> Extras:
    extras = session.get(Extras, extras_id)
    if not extras or extras.event_id != event_id:
        raise NotFoundError("Extras not found")
    session.delete(extras)
    session.commit()
    return extras


def save_extras_purchase(
    session: Session,
    registration_id: UUID,
    extras_ids: list[UUID],
    status: bool = False,
) -> ExtrasPurchase:
    """Snapshot the chosen extras onto a new purchase with its own QR token."""
    extras = session.exec(select(Extras).where(col(Extras.id).in_(extras_ids))).all()
    purchase = ExtrasPurchase(
        registration_id=registration_id,
        extras_data=[
            {"name": item.name, "price": item.price, "content": item.content}
            for item in extras
        ],
        status=status,
        scanned_at=None,
    )
    session.add(purchase)
    session.commit()
    session.refresh(purchase)
    return purchase
