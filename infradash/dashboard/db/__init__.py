from db.repository import (
    DashboardRepository,
    close_repository,
    get_repository,
    init_repository,
)

__all__ = [
    "DashboardRepository",
    "close_repository",
    "get_repository",
    "init_repository",
]
