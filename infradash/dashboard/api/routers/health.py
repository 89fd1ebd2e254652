from fastapi import APIRouter

from dashboard_service.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@router.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health() -> HealthResponse:
    """Liveness probe; does not touch the rollup store."""

    return HealthResponse(status="ok")
