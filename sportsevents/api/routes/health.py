"""Health check route handler."""

from fastapi import APIRouter

from sportsevents.models.schemas import HealthResponse

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Service status
    """
    return {"status": "healthy", "message": "API is running"}
