"""User route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.database.db import get_db_session
from sportsevents.services import user_service
from sportsevents.api.auth_dependencies import require_user
from sportsevents.models.schemas import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/users", response_model=List[UserResponse])
async def list_users(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """List every registered user."""
    try:
        users = await user_service.get_all_users(session)
        return [user_service.public_user(u) for u in users]
    except Exception as e:
        logger.error(f"Error listing users: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error listing users: {str(e)}")
