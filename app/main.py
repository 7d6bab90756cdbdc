"""Event Ticketing Web Application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import create_db_and_tables
from app.routes import auth, events, tickets

# Configure logging
log_dir = Path.home() / ".logs" / "ticketing"
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Event Ticketing application")
    create_db_and_tables()
    if not settings.smtp_configured:
        logger.warning("SMTP is not configured, ticket emails will only be logged")
    yield
    logger.info("Event Ticketing application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Event registration with QR-code ticket emails",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for the registration frontend
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(tickets.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
