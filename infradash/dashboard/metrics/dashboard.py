import logging
from datetime import datetime

from db.repository import DashboardRepository
from metrics.heatmap import build_cluster_usage
from metrics.providers import capabilities_for
from metrics.recent import recent_series
from metrics.rollups import TRAILING_WINDOW_DAYS, DailyMetricsCache, RollupSelector
from metrics.status import build_aggregate_status
from metrics.utilization import utilization_points, utilization_series
from models import (
    AggregateStatus,
    ChartConfig,
    EmsUtilization,
    EntityKind,
    Heatmaps,
    MetricSample,
    RecentSeries,
    Viewer,
)

logger = logging.getLogger("dashboard")


class InfraDashboard:
    """Request-scoped view of the infrastructure dashboard.

    ``ems_id`` scopes every section to one manager; ``None`` covers every
    infrastructure manager. The manager lookup happens up front so an unknown
    id fails with ``RecordNotFound`` before any metric query runs.
    """

    def __init__(
        self,
        repository: DashboardRepository,
        viewer: Viewer,
        ems_id: int | None = None,
        window_days: int = TRAILING_WINDOW_DAYS,
        now: datetime | None = None,
        cache: DailyMetricsCache | None = None,
    ) -> None:
        self._repository = repository
        self.manager = repository.find_manager(ems_id) if ems_id is not None else None
        self.capabilities = capabilities_for(
            self.manager.provider_family if self.manager is not None else None
        )
        self._selector = RollupSelector(repository, viewer, window_days, now)
        self._cache = cache if cache is not None else DailyMetricsCache()

    @property
    def scope_id(self) -> int | None:
        return self.manager.id if self.manager is not None else None

    def daily_provider_metrics(self) -> list[MetricSample]:
        return self._cache.get_or_load(lambda: self._selector.daily_rollups(self.manager))

    def cluster_heatmap_data(self) -> Heatmaps:
        samples = self._selector.latest_cluster_rollups(self.manager)
        cpu_usage, memory_usage = build_cluster_usage(samples, self.manager)
        logger.info(
            "cluster_heatmap_built",
            extra={
                "ems_id": self.scope_id,
                "rollups": len(samples),
                "clusters": len(cpu_usage),
            },
        )
        return Heatmaps(
            cluster_cpu_usage=cpu_usage or None,
            cluster_memory_usage=memory_usage or None,
            title=self.capabilities.heatmap_title,
        )

    def ems_utilization_data(self) -> EmsUtilization:
        return utilization_series(utilization_points(self.daily_provider_metrics()))

    def _recent(self, kind: EntityKind, config: ChartConfig) -> RecentSeries:
        records = self._repository.records_created_since(
            kind, self.scope_id, self._selector.since
        )
        return recent_series(records, config)

    def recent_hosts_data(self) -> RecentSeries:
        return self._recent(
            EntityKind.HOST,
            ChartConfig(
                title=self.capabilities.recent_hosts_title,
                label=self.capabilities.host_label,
            ),
        )

    def recent_vms_data(self) -> RecentSeries:
        return self._recent(EntityKind.VM, ChartConfig(title="Recent VMs", label="VMs"))

    def aggregate_status_data(self) -> AggregateStatus:
        if self.manager is None:
            raise ValueError("Aggregate status requires a manager scope")
        counts = self._repository.inventory_counts(self.manager.id)
        return build_aggregate_status(self.manager, counts, self.capabilities)
