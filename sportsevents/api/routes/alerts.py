"""Alert route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.database.db import get_db_session
from sportsevents.services import alert_service
from sportsevents.api.auth_dependencies import require_user
from sportsevents.models.schemas import (
    AlertListResponse,
    MarkAllAsReadResponse,
    MarkAsReadResponse,
    UnreadCountResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/alerts", response_model=AlertListResponse)
async def get_alerts(
    limit: int = Query(50, ge=1, le=100, description="Alerts per page"),
    offset: int = Query(0, ge=0, description="Alerts to skip"),
    unread_only: bool = False,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get the caller's alerts, newest first, with pagination."""
    try:
        user_id = user.get("id")
        return await alert_service.get_user_alerts(
            session, user_id, limit=limit, offset=offset, unread_only=unread_only
        )
    except Exception as e:
        logger.error(f"Error fetching alerts: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching alerts: {str(e)}")


@router.get("/api/alerts/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Get the caller's unread alert count."""
    try:
        user_id = user.get("id")
        count = await alert_service.get_unread_count(session, user_id)
        return {"count": count}
    except Exception as e:
        logger.error(f"Error fetching unread count: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching unread count: {str(e)}")


@router.put("/api/alerts/mark-all-read", response_model=MarkAllAsReadResponse)
async def mark_all_alerts_as_read(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Mark all of the caller's alerts as read."""
    try:
        user_id = user.get("id")
        count = await alert_service.mark_all_as_read(session, user_id)
        return {"success": True, "count": count}
    except Exception as e:
        logger.error(f"Error marking all alerts as read: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error marking all alerts as read: {str(e)}")


@router.put("/api/alerts/{alert_id}/read", response_model=MarkAsReadResponse)
async def mark_alert_as_read(
    alert_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Mark one of the caller's alerts as read. Already-read alerts succeed too."""
    try:
        user_id = user.get("id")
        success = await alert_service.mark_as_read(session, alert_id, user_id)
    except Exception as e:
        logger.error(f"Error marking alert as read: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error marking alert as read: {str(e)}")

    if not success:
        raise HTTPException(status_code=404, detail="Alert not found")
    return {"success": True}
