"""Tests for event management helpers."""

from datetime import UTC, date, datetime

import pytest
from sqlmodel import Session

from app.core.errors import AccessDeniedError, SlugConflictError
from app.core.security import ROLE_ADMIN, ROLE_SUDO, CurrentUser
from app.events import service
from app.events.schemas import EventPayload, ExtrasPayload
from app.models import Event, EventConfig, Registration


class TestGenerateSlug:
    def test_empty(self):
        assert service.generate_slug(None) == ""
        assert service.generate_slug("") == ""

    def test_basic(self):
        assert service.generate_slug("Spring Gala 2025") == "spring-gala-2025"

    def test_special_characters(self):
        assert service.generate_slug("  Rock & Roll: Live!  ") == "rock-roll-live"

    def test_collapses_hyphens(self):
        assert service.generate_slug("--A  -- B--") == "a-b"


class TestUniqueSlug:
    def test_suffixes(self, session: Session, sample_event: Event):
        assert service.generate_unique_slug(session, "Spring Gala") == "spring-gala-1"

        session.add(Event(name="Spring Gala", slug="spring-gala-1", club_id=1))
        session.commit()
        assert service.generate_unique_slug(session, "Spring Gala") == "spring-gala-2"

    def test_excludes_own_event(self, session: Session, sample_event: Event):
        assert service.is_slug_unique(session, "spring-gala", exclude_id=sample_event.id)
        assert not service.is_slug_unique(session, "spring-gala")


class TestSaveEvent:
    def test_create_generates_slug(self, session: Session, sample_event: Event, admin_user):
        event = service.save_event(
            session,
            EventPayload(name="Spring Gala", end_datetime="", currency=None),
            admin_user,
        )
        assert event.slug == "spring-gala-1"
        assert event.club_id == admin_user.club_id
        assert event.created_by == admin_user.id
        assert event.end_datetime is None
        assert event.currency == "USD"
        assert event.registration_count == 0

    def test_custom_slug_conflict(self, session: Session, sample_event: Event, admin_user):
        with pytest.raises(SlugConflictError):
            service.save_event(
                session, EventPayload(name="Other", slug="spring-gala"), admin_user
            )

    def test_update_keeps_slug(self, session: Session, sample_event: Event, admin_user):
        updated = service.save_event(
            session,
            EventPayload(id=sample_event.id, name="Renamed Gala", location="Garden"),
            admin_user,
        )
        assert updated.slug == "spring-gala"
        assert updated.name == "Renamed Gala"
        assert updated.location == "Garden"

    def test_update_other_club_denied(self, session: Session, sample_event: Event):
        outsider = CurrentUser(id=5, club_id=2, role=ROLE_ADMIN)
        with pytest.raises(AccessDeniedError):
            service.save_event(
                session, EventPayload(id=sample_event.id, name="Hijacked"), outsider
            )

    def test_sudo_can_update_any_event(self, session: Session, sample_event: Event):
        sudo = CurrentUser(id=99, role=ROLE_SUDO)
        updated = service.save_event(
            session, EventPayload(id=sample_event.id, name="Updated"), sudo
        )
        assert updated.name == "Updated"
        assert updated.club_id == 1

    def test_naive_datetimes_are_utc(self):
        payload = EventPayload(
            name="Naive", start_datetime="2025-06-01T18:00:00", end_datetime="2025-06-02T02:00:00+02:00"
        )
        assert payload.start_datetime == datetime(2025, 6, 1, 18, 0, tzinfo=UTC)
        assert payload.end_datetime.utcoffset().total_seconds() == 7200

    def test_config_stored_typed(self, session: Session, admin_user):
        event = service.save_event(
            session,
            EventPayload(name="Config Test", config={"isAllDay": "true"}),
            admin_user,
        )
        assert event.config["isAllDay"] is True
        assert event.config["saveAllAttendeesDetails"] is False


class TestListing:
    def test_pagination(self, session: Session):
        for day in range(1, 8):
            session.add(
                Event(
                    name=f"Event {day}",
                    slug=f"event-{day}",
                    club_id=1,
                    start_datetime=datetime(2025, 6, day, tzinfo=UTC),
                )
            )
        session.add(Event(name="Elsewhere", slug="elsewhere", club_id=2))
        session.commit()

        page = service.list_events(session, club_id=1, page=2, items_per_page=3)

        assert page["total_items"] == 7
        assert page["total_pages"] == 3
        assert [e.name for e in page["items"]] == ["Event 4", "Event 5", "Event 6"]

    def test_active_events(self, session: Session):
        session.add_all([
            Event(name="Past", slug="past", club_id=1,
                  start_datetime=datetime(2025, 5, 1, 18, 0, tzinfo=UTC)),
            Event(name="Today", slug="today", club_id=1,
                  start_datetime=datetime(2025, 6, 1, 18, 0, tzinfo=UTC)),
            Event(name="Running", slug="running", club_id=1,
                  start_datetime=datetime(2025, 5, 30, tzinfo=UTC), end_datetime=datetime(2025, 6, 3, tzinfo=UTC)),
            Event(name="Finished", slug="finished", club_id=1,
                  start_datetime=datetime(2025, 5, 20, tzinfo=UTC), end_datetime=datetime(2025, 5, 22, tzinfo=UTC)),
        ])
        session.commit()

        active = service.get_active_events(session, club_id=1, current_date=date(2025, 6, 1))

        assert {e.name for e in active} == {"Today", "Running"}

    def test_registration_count(self, session: Session, sample_event: Event):
        service.increase_registration_count(session, sample_event.id)
        assert session.get(Event, sample_event.id).registration_count == 1


class TestExtras:
    def test_upsert_and_remove(self, session: Session, sample_event: Event):
        created = service.upsert_extras(
            session, sample_event.id, ExtrasPayload(name="Parking", price=1000)
        )
        updated = service.upsert_extras(
            session, sample_event.id, ExtrasPayload(id=created.id, name="Parking", price=1200)
        )
        assert updated.id == created.id
        assert [e.price for e in service.get_extras_by_event(session, sample_event.id)] == [1200]

        service.remove_extras(session, sample_event.id, created.id)
        assert service.get_extras_by_event(session, sample_event.id) == []

    def test_purchase_snapshot(self, session: Session, sample_event: Event):
        extras = service.upsert_extras(
            session, sample_event.id, ExtrasPayload(name="T-Shirt", price=2000, content=["size M"])
        )
        registration = Registration(event_id=sample_event.id)
        session.add(registration)
        session.commit()

        purchase = service.save_extras_purchase(session, registration.id, [extras.id])

        assert purchase.extras_data == [{"name": "T-Shirt", "price": 2000, "content": ["size M"]}]
        assert purchase.qr_uuid is not None
        assert purchase.status is False


def test_save_config(session: Session, sample_event: Event):
    event = service.save_config(session, sample_event.id, EventConfig(save_all_attendees_details=True))
    assert event.get_config().save_all_attendees_details is True
