"""Authentication route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sportsevents.api.routes import limiter, INVALID_CREDENTIALS_RESPONSE, service_error_response
from sportsevents.database.db import get_db_session
from sportsevents.services import auth_service, user_service
from sportsevents.services.errors import ServiceError
from sportsevents.api.auth_dependencies import get_current_token, get_current_user
from sportsevents.models.schemas import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    LogoutResponse,
    UserResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


async def _start_session(session: AsyncSession, user: dict) -> AuthResponse:
    token = auth_service.generate_session_token()
    login_session = await user_service.create_login_session(
        session, user["id"], token, auth_service.session_expiry()
    )
    return AuthResponse(
        access_token=token,
        token_type="bearer",
        expires_at=login_session["expires_at"],
        user=UserResponse(**user_service.public_user(user)),
    )


@router.post("/api/auth/register", response_model=AuthResponse)
@limiter.limit("10/minute")
async def register(
    request: Request, payload: RegisterRequest, session: AsyncSession = Depends(get_db_session)
):
    """Register a new account and log it in."""
    try:
        username = auth_service.normalize_username(payload.username)
        auth_service.validate_password(payload.password)
        if not payload.name or not payload.name.strip():
            raise HTTPException(status_code=400, detail="Name is required")

        user_id = await user_service.create_user(
            session,
            username=username,
            name=payload.name.strip(),
            password_hash=auth_service.hash_password(payload.password),
        )
        user = await user_service.get_user_by_id(session, user_id)
        return await _start_session(session, user)
    except HTTPException:
        raise
    except ServiceError as e:
        raise service_error_response(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error during registration: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error during registration: {str(e)}")


@router.post("/api/auth/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(
    request: Request, payload: LoginRequest, session: AsyncSession = Depends(get_db_session)
):
    """Login with username and password."""
    try:
        user = await user_service.get_user_by_username(session, payload.username)
        if not user:
            raise INVALID_CREDENTIALS_RESPONSE
        if not auth_service.verify_password(payload.password, user["password_hash"]):
            raise INVALID_CREDENTIALS_RESPONSE

        response = await _start_session(session, user)
        logger.info(f"User {user['id']} logged in")
        return response
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during login: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error during login: {str(e)}")


@router.post("/api/auth/logout", response_model=LogoutResponse)
async def logout(
    token: str = Depends(get_current_token), session: AsyncSession = Depends(get_db_session)
):
    """End the login session identified by the bearer token."""
    try:
        deleted = await user_service.delete_login_session(session, token)
        return {"success": deleted}
    except Exception as e:
        logger.error(f"Error during logout: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error during logout: {str(e)}")


@router.get("/api/auth/me", response_model=UserResponse)
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Get the logged-in user's information."""
    return current_user
