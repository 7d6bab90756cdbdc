"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.database import get_session
from app.core.errors import DeliveryFailure
from app.core.security import ROLE_ADMIN, ROLE_SUDO, CurrentUser, create_access_token
from app.mail.transport import OutgoingMail, SendResult
from app.main import app
from app.models import Attendee, Event, ExtrasPurchase, Order, Registration
from app.routes.tickets import get_mail_transport


class RecordingTransport:
    """Mail transport that records messages and can fail for chosen recipients."""

    def __init__(self):
        self.sent: list[OutgoingMail] = []
        self.fail_for: set[str] = set()

    def send(self, mail: OutgoingMail) -> SendResult:
        if mail.to in self.fail_for:
            raise DeliveryFailure(f"Mailbox unavailable: {mail.to}")
        self.sent.append(mail)
        return SendResult(message_id=f"msg-{len(self.sent)}")


def fake_qr(data: str) -> bytes:
    return data.encode()


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="transport")
def transport_fixture() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture(name="client")
def client_fixture(session: Session, transport: RecordingTransport):
    """Create a test client with the test database session and fake mail."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_mail_transport] = lambda: transport
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="admin_user")
def admin_user_fixture() -> CurrentUser:
    return CurrentUser(id=1, club_id=1, role=ROLE_ADMIN)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin_user: CurrentUser) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin_user)}"}


@pytest.fixture(name="sudo_headers")
def sudo_headers_fixture() -> dict:
    user = CurrentUser(id=99, club_id=None, role=ROLE_SUDO)
    return {"Authorization": create_access_token(user)}


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session) -> Event:
    """Create a single-day event owned by club 1."""
    event = Event(
        name="Spring Gala",
        slug="spring-gala",
        location="Main Hall",
        start_datetime=datetime(2025, 6, 1, 18, 0, tzinfo=UTC),
        timezone="UTC",
        club_id=1,
        created_by=1,
        config={"saveAllAttendeesDetails": False},
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@pytest.fixture(name="make_registration")
def make_registration_fixture(session: Session):
    """Factory for a registration with attendees, orders and optional extras."""

    def make(
        event: Event,
        attendee_count: int = 3,
        line_items: list[dict] | None = None,
        total_amount: int | None = None,
        extras_data: list[dict] | None = None,
    ) -> Registration:
        registration = Registration(
            event_id=event.id,
            status=True,
            created_at=datetime(2025, 5, 1, 15, 30, tzinfo=UTC),
        )
        session.add(registration)
        session.flush()

        for index in range(attendee_count):
            session.add(
                Attendee(
                    registration_id=registration.id,
                    first_name=f"Guest{index + 1}",
                    last_name="Smith",
                    email=f"guest{index + 1}@example.com",
                    is_primary=index == 0,
                    ticket_title="General",
                )
            )

        session.add(
            Order(
                registration_id=registration.id,
                items=line_items
                if line_items is not None
                else [{"ticketTitle": "General", "quantity": attendee_count, "unitPrice": 2500}],
                total_amount=total_amount,
            )
        )

        if extras_data:
            session.add(
                ExtrasPurchase(registration_id=registration.id, extras_data=extras_data)
            )

        session.commit()
        session.refresh(registration)
        return registration

    return make
