"""
Sports Event Manager API Server

FastAPI server for events, join codes, teams, matches, announcements and alerts.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from sportsevents.api.routes import router, limiter as routes_limiter
from sportsevents.database import db
from sportsevents.services import user_service
from sportsevents.services.alert_service import register_alert_subscribers

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting up Sports Event Manager API...")

    # Initialize database (create tables if they don't exist)
    try:
        await db.init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    # Alert fan-out must be subscribed before any mutation is served
    register_alert_subscribers()
    logger.info("Alert subscribers registered")

    # Drop sessions that expired while the server was down
    try:
        async with db.AsyncSessionLocal() as session:
            await user_service.delete_expired_login_sessions(session)
    except Exception as e:
        logger.warning(f"Could not purge expired login sessions: {e}")

    yield  # App is running

    # Shutdown
    logger.info("Shutting down Sports Event Manager API...")

    try:
        await db.close_database()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {e}", exc_info=True)


app = FastAPI(
    title="Sports Event Manager API",
    description="API for sports events: join codes, teams, matches, announcements and alerts",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = routes_limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware; origins configured via ALLOWED_ORIGINS env var
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
