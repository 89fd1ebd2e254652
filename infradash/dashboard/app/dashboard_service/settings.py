import os
from dataclasses import dataclass


@dataclass(slots=True)
class Settings:
    host: str
    port: int
    log_level: str
    db_url: str
    trailing_window_days: int
    default_timezone: str
    cors_origins: list[str]

    @classmethod
    def from_env(cls) -> "Settings":
        cors_origins = [
            origin.strip()
            for origin in os.getenv(
                "DASHBOARD_CORS_ORIGINS", "http://localhost:5173"
            ).split(",")
            if origin.strip()
        ]

        return cls(
            host=os.getenv("DASHBOARD_HOST", "0.0.0.0"),
            port=int(os.getenv("DASHBOARD_PORT", "8000")),
            log_level=os.getenv("DASHBOARD_LOG_LEVEL", "INFO"),
            db_url=os.getenv("DASHBOARD_DB_URL", "sqlite:///./dashboard.db"),
            trailing_window_days=int(
                os.getenv("DASHBOARD_TRAILING_WINDOW_DAYS", "30")
            ),
            default_timezone=os.getenv("DASHBOARD_DEFAULT_TIMEZONE", "UTC").strip()
            or "UTC",
            cors_origins=cors_origins,
        )
