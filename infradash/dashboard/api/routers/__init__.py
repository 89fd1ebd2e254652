from api.routers.dashboard import router as dashboard_router
from api.routers.health import router as health_router

__all__ = [
    "dashboard_router",
    "health_router",
]
