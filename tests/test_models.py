"""Tests for database models and typed configuration."""

from datetime import UTC, datetime

import pytest
from sqlmodel import Session, select

from app.models import (
    Attendee,
    Event,
    EventConfig,
    ExtrasPurchase,
    Order,
    OrderLineItem,
    Registration,
)


class TestEventConfig:
    def test_defaults(self):
        config = EventConfig.from_raw(None)
        assert config.is_all_day is False
        assert config.is_single_day_event is True
        assert config.max_tickets_per_registration == 2
        assert config.save_all_attendees_details is False
        assert config.date_format == "MM/DD/YYYY HH:mm"
        assert config.show_end_time is False

    def test_camel_case_and_string_booleans(self):
        config = EventConfig.from_raw(
            {
                "isAllDay": "true",
                "isSingleDayEvent": "false",
                "saveAllAttendeesDetails": True,
                "maxTicketsPerRegistration": "5",
            }
        )
        assert config.is_all_day is True
        assert config.is_single_day_event is False
        assert config.save_all_attendees_details is True
        assert config.max_tickets_per_registration == 5

    def test_null_values_use_defaults(self):
        config = EventConfig.from_raw({"dateFormat": None, "isSingleDayEvent": None, "isAllDay": ""})
        assert config.date_format == "MM/DD/YYYY HH:mm"
        assert config.is_single_day_event is True
        assert config.is_all_day is False

    def test_round_trip_uses_camel_case(self):
        config = EventConfig(is_all_day=True)
        assert config.to_json()["isAllDay"] is True

    def test_rejects_invalid_max_tickets(self):
        with pytest.raises(ValueError):
            EventConfig.model_validate({"maxTicketsPerRegistration": 0})

    def test_stored_invalid_values_use_defaults(self):
        config = EventConfig.from_raw(
            {
                "maxTicketsPerRegistration": 0,
                "isAllDay": "maybe",
                "saveAllAttendeesDetails": "true",
            }
        )
        assert config.max_tickets_per_registration == 2
        assert config.is_all_day is False
        assert config.save_all_attendees_details is True

    def test_stored_non_dict_uses_defaults(self):
        assert EventConfig.from_raw(["isAllDay"]) == EventConfig()


class TestEventModel:
    def test_create_event(self, session: Session):
        event = Event(
            name="Spring Gala",
            slug="spring-gala",
            club_id=1,
            config={"isAllDay": "true"},
        )
        session.add(event)
        session.commit()

        retrieved = session.exec(select(Event).where(Event.slug == "spring-gala")).first()
        assert retrieved is not None
        assert retrieved.currency == "USD"
        assert retrieved.registration_count == 0
        assert retrieved.get_config().is_all_day is True

    def test_event_unique_slug(self, session: Session):
        session.add(Event(name="First", slug="gala", club_id=1))
        session.commit()

        session.add(Event(name="Second", slug="gala", club_id=1))
        with pytest.raises(Exception):  # IntegrityError
            session.commit()


class TestOrderModel:
    def test_line_items(self, session: Session, sample_event: Event):
        registration = Registration(event_id=sample_event.id)
        session.add(registration)
        session.flush()
        order = Order(
            registration_id=registration.id,
            items=[
                {"ticketTitle": "General", "quantity": 2, "unitPrice": 2500},
                {"title": "VIP", "quantity": 1, "price": 5000},
            ],
            total_amount=10000,
        )
        session.add(order)
        session.commit()

        retrieved = session.get(Order, order.id)
        assert retrieved.line_items == [
            OrderLineItem("General", 2, 2500),
            OrderLineItem("VIP", 1, 5000),
        ]
        assert sum(item.amount for item in retrieved.line_items) == 10000

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValueError):
            OrderLineItem("General", -1, 2500)

    def test_stored_invalid_values_read_as_zero(self):
        order = Order(
            items=[
                {"ticketTitle": "General", "quantity": -2, "unitPrice": 2500},
                {"ticketTitle": "VIP", "quantity": "two", "unitPrice": -100},
            ]
        )
        assert order.line_items == [
            OrderLineItem("General", 0, 2500),
            OrderLineItem("VIP", 0, 0),
        ]


class TestRegistrationRelationships:
    def test_attendees_and_extras(self, session: Session, sample_event: Event):
        registration = Registration(
            event_id=sample_event.id, created_at=datetime(2025, 5, 1, tzinfo=UTC)
        )
        session.add(registration)
        session.flush()
        session.add(
            Attendee(
                registration_id=registration.id,
                first_name="Ada",
                last_name="Lovelace",
                email="ada@example.com",
                is_primary=True,
            )
        )
        session.add(
            ExtrasPurchase(
                registration_id=registration.id,
                extras_data=[{"name": "Parking", "price": 1000, "content": []}],
            )
        )
        session.commit()
        session.refresh(registration)

        assert registration.attendees[0].full_name == "Ada Lovelace"
        assert registration.attendees[0].qr_uuid is not None
        assert registration.extras_purchase.extras_data[0]["name"] == "Parking"
        assert registration.event.name == "Spring Gala"
