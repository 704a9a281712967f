"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter, constants) lives here; every sub-router
imports what it needs from this package.
"""

import os

from fastapi import APIRouter, HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

from sportsevents.services.errors import ServiceError

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
if IS_TEST_ENV:
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------
INVALID_CREDENTIALS_RESPONSE = HTTPException(
    status_code=401, detail="Username or password is incorrect"
)


def service_error_response(error: ServiceError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    return HTTPException(status_code=error.status_code, detail=str(error))


# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from sportsevents.api.routes.auth import router as auth_router  # noqa: E402
from sportsevents.api.routes.users import router as users_router  # noqa: E402
from sportsevents.api.routes.events import router as events_router  # noqa: E402
from sportsevents.api.routes.teams import router as teams_router  # noqa: E402
from sportsevents.api.routes.matches import router as matches_router  # noqa: E402
from sportsevents.api.routes.announcements import router as announcements_router  # noqa: E402
from sportsevents.api.routes.alerts import router as alerts_router  # noqa: E402
from sportsevents.api.routes.health import router as health_router  # noqa: E402

router = APIRouter()
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(events_router)
router.include_router(teams_router)
router.include_router(matches_router)
router.include_router(announcements_router)
router.include_router(alerts_router)
router.include_router(health_router)
