"""Database configuration and session management.

The engine is built from ``settings.database_url``. SQLite is the default
for local development; for SQLite connections two pragmas are applied on
every new connection:

    - **WAL (Write-Ahead Logging)**: readers are not blocked while a ticket
      resend or event update is writing.

    - **Foreign Keys**: disabled by default in SQLite. Enabled so that
      attendees, orders and extras purchases always reference an existing
      registration.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

is_sqlite = settings.database_url.startswith("sqlite")

# FastAPI may hand a session to a different thread than the one that
# created its connection.
connect_args = {"check_same_thread": False} if is_sqlite else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


if is_sqlite:

    @sa_event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Configure SQLite pragmas on each new connection."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
