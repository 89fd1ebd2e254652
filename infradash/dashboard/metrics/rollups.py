import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from db.repository import DashboardRepository
from models import (
    ConfigurationError,
    InfraManager,
    MetricSample,
    ResourceType,
    TimeProfile,
    Viewer,
)

logger = logging.getLogger("dashboard")

TRAILING_WINDOW_DAYS = 30


class DailyMetricsCache:
    """Holds the daily rollup query result for a single request.

    The loader runs at most once per instance; a failed load is not cached.
    Create a new instance per request.
    """

    def __init__(self) -> None:
        self._samples: list[MetricSample] | None = None
        self.loads = 0

    @property
    def loaded(self) -> bool:
        return self._samples is not None

    def get_or_load(
        self, loader: Callable[[], list[MetricSample]]
    ) -> list[MetricSample]:
        if self._samples is None:
            self._samples = list(loader())
            self.loads += 1
        return self._samples


class RollupSelector:
    def __init__(
        self,
        repository: DashboardRepository,
        viewer: Viewer,
        window_days: int = TRAILING_WINDOW_DAYS,
        now: datetime | None = None,
    ) -> None:
        if window_days < 1:
            raise ValueError("window_days must be at least 1")
        self._repository = repository
        self._viewer = viewer
        self._now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        self.window_days = window_days

    @property
    def since(self) -> datetime:
        return self._now - timedelta(days=self.window_days)

    def resolve_time_profile(self) -> TimeProfile:
        profile = self._repository.profile_for_user(
            self._viewer.user_id, self._viewer.timezone
        )
        source = "viewer"
        if profile is None:
            profile = self._repository.default_profile()
            source = "default"
        if profile is None:
            raise ConfigurationError(
                f"No daily time profile for user '{self._viewer.user_id}' "
                f"in '{self._viewer.timezone}' and no default profile is configured"
            )

        logger.debug(
            "time_profile_resolved",
            extra={"time_profile_id": profile.id, "source": source},
        )
        return profile

    def daily_rollups(self, scope: InfraManager | None) -> list[MetricSample]:
        """Daily rollups for ``scope``, or every infra manager when unscoped."""

        profile = self.resolve_time_profile()
        manager_ids = [scope.id] if scope is not None else self._repository.manager_ids()
        samples = self._repository.daily_rollups(profile, manager_ids, self.since)
        logger.info(
            "daily_rollups_selected",
            extra={
                "ems_id": scope.id if scope is not None else None,
                "time_profile_id": profile.id,
                "count": len(samples),
            },
        )
        return samples

    def latest_cluster_rollups(self, scope: InfraManager | None) -> list[MetricSample]:
        cluster_ids = (
            self._repository.cluster_ids_for_manager(scope.id)
            if scope is not None
            else None
        )
        return self._repository.latest_rollups(
            ResourceType.CLUSTER, cluster_ids, self.since
        )
