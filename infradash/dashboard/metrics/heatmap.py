import logging
from collections.abc import Iterable

from metrics.precision import finite_or_none, round_fraction, round_whole
from metrics.utilization import MB_PER_GB
from models import ClusterUsageEntry, InfraManager, MetricSample

logger = logging.getLogger("dashboard")

CPU_UNIT = "Cores"
MEMORY_UNIT = "GB"


def usage_fraction(rate: float | None, *, resource_id: int, field: str) -> float | None:
    """Map a 0-100 usage rate to a 0-1 fraction, clamping out-of-range input."""

    rate = finite_or_none(rate)
    if rate is None:
        return None

    fraction = rate / 100.0
    if fraction < 0.0 or fraction > 1.0:
        logger.warning(
            "usage_rate_clamped",
            extra={"resource_id": resource_id, "field": field, "value": rate},
        )
        fraction = min(max(fraction, 0.0), 1.0)
    return round_fraction(fraction)


def _total(value: float | None, divisor: float = 1.0) -> int | None:
    value = finite_or_none(value)
    return round_whole(value / divisor) if value is not None else None


def build_cluster_usage(
    samples: Iterable[MetricSample], scope: InfraManager | None
) -> tuple[list[ClusterUsageEntry], list[ClusterUsageEntry]]:
    """Turn the latest rollup per cluster into CPU and memory heatmap entries.

    Rollups whose cluster has been purged are skipped; metric retention and
    inventory deletion run independently, so this is routine.
    """

    cpu_entries: list[ClusterUsageEntry] = []
    memory_entries: list[ClusterUsageEntry] = []

    for sample in samples:
        cluster = sample.resource
        if cluster is None:
            logger.debug(
                "heatmap_rollup_without_cluster",
                extra={"rollup_id": sample.id, "resource_id": sample.resource_id},
            )
            continue

        provider_name = scope.name if scope is not None else cluster.ems_name

        cpu_entries.append(
            ClusterUsageEntry(
                cluster_id=cluster.id,
                cluster_name=cluster.name,
                provider_name=provider_name,
                unit=CPU_UNIT,
                total=_total(sample.derived_vm_numvcpus),
                percent=usage_fraction(
                    sample.cpu_usage_rate_average,
                    resource_id=cluster.id,
                    field="cpu_usage_rate_average",
                ),
            )
        )
        memory_entries.append(
            ClusterUsageEntry(
                cluster_id=cluster.id,
                cluster_name=cluster.name,
                provider_name=provider_name,
                unit=MEMORY_UNIT,
                total=_total(sample.derived_memory_available, MB_PER_GB),
                percent=usage_fraction(
                    sample.mem_usage_absolute_average,
                    resource_id=cluster.id,
                    field="mem_usage_absolute_average",
                ),
            )
        )

    return cpu_entries, memory_entries
