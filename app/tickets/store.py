"""Read-only lookups used when ticketing a registration."""
from uuid import UUID

from sqlmodel import Session, col, select

from app.models import (
    Attendee,
    Event,
    ExtrasPurchase,
    Order,
    OrderLineItem,
    Registration,
)


def get_registration(session: Session, registration_id: UUID) -> Registration | None:
    return session.get(Registration, registration_id)


def get_event(session: Session, event_id: UUID) -> Event | None:
    return session.get(Event, event_id)


def get_attendee(session: Session, attendee_id: UUID) -> Attendee | None:
    return session.get(Attendee, attendee_id)


def get_attendees_by_registration(session: Session, registration_id: UUID) -> list[Attendee]:
    """Attendees of a registration, primary attendee first."""
    statement = (
        select(Attendee)
        .where(Attendee.registration_id == registration_id)
        .order_by(col(Attendee.is_primary).desc(), Attendee.created_at)
    )
    return list(session.exec(statement).all())


def get_extras_purchase(session: Session, registration_id: UUID) -> ExtrasPurchase | None:
    statement = select(ExtrasPurchase).where(
        ExtrasPurchase.registration_id == registration_id
    )
    return session.exec(statement).first()


def _get_orders(session: Session, registration_id: UUID) -> list[Order]:
    statement = (
        select(Order)
        .where(Order.registration_id == registration_id)
        .order_by(Order.created_at)
    )
    return list(session.exec(statement).all())


def get_order_line_items(session: Session, registration_id: UUID) -> list[OrderLineItem]:
    """Line items across every order of a registration."""
    return [
        item
        for order in _get_orders(session, registration_id)
        for item in order.line_items
    ]


def get_order_total(session: Session, registration_id: UUID) -> int | None:
    """Sum of recorded order totals, or None if no order recorded one."""
    totals = [
        order.total_amount
        for order in _get_orders(session, registration_id)
        if order.total_amount is not None
    ]
    return sum(totals) if totals else None
