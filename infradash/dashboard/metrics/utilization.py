from collections.abc import Iterable
from operator import attrgetter

from metrics.buckets import DayBucket, sum_by_day
from metrics.precision import round_fraction, round_whole
from models import EmsUtilization, MetricSample, UsageSummary, UtilizationPoint

MB_PER_GB = 1024

_DAILY_FIELDS = {
    "used_cpu": attrgetter("v_derived_cpu_total_cores_used"),
    "total_cpu": attrgetter("derived_vm_numvcpus"),
    "used_mem": attrgetter("derived_memory_used"),
    "total_mem": attrgetter("derived_memory_available"),
}


def _cores(value: float | None) -> int | None:
    return round_whole(value) if value is not None else None


def _gigabytes(value: float | None) -> int | None:
    return round_whole(value / MB_PER_GB) if value is not None else None


def _ratio(used: float | None, total: float | None) -> float | None:
    if used is None or total is None or total <= 0:
        return None
    return round_fraction(used / total)


def build_utilization_points(
    used_cpu: DayBucket,
    total_cpu: DayBucket,
    used_mem: DayBucket,
    total_mem: DayBucket,
) -> list[UtilizationPoint]:
    """Align four day buckets into one point per date in their union.

    A date missing from a bucket yields ``None`` for that field. Memory is
    reported in GB (source MB / 1024), CPU in whole cores.
    """

    dates = sorted(set(used_cpu) | set(total_cpu) | set(used_mem) | set(total_mem))
    points: list[UtilizationPoint] = []
    for date in dates:
        cpu_used = used_cpu.get(date)
        cpu_total = total_cpu.get(date)
        mem_used = used_mem.get(date)
        mem_total = total_mem.get(date)
        points.append(
            UtilizationPoint(
                date=date,
                used_cpu=_cores(cpu_used),
                total_cpu=_cores(cpu_total),
                used_mem=_gigabytes(mem_used),
                total_mem=_gigabytes(mem_total),
                cpu_percent=_ratio(cpu_used, cpu_total),
                mem_percent=_ratio(mem_used, mem_total),
            )
        )
    return points


def utilization_points(samples: Iterable[MetricSample]) -> list[UtilizationPoint]:
    buckets = sum_by_day(samples, _DAILY_FIELDS)
    return build_utilization_points(
        buckets["used_cpu"],
        buckets["total_cpu"],
        buckets["used_mem"],
        buckets["total_mem"],
    )


def utilization_series(points: list[UtilizationPoint]) -> EmsUtilization:
    if not points:
        return EmsUtilization(data_available=False)

    latest = points[-1]
    return EmsUtilization(
        data_available=True,
        dates=[point.date for point in points],
        used_cpu=[point.used_cpu for point in points],
        total_cpu=[point.total_cpu for point in points],
        used_mem=[point.used_mem for point in points],
        total_mem=[point.total_mem for point in points],
        cpu_percent=[point.cpu_percent for point in points],
        mem_percent=[point.mem_percent for point in points],
        cpu=UsageSummary(used=latest.used_cpu, total=latest.total_cpu),
        memory=UsageSummary(used=latest.used_mem, total=latest.total_mem),
    )
