from metrics.buckets import count_by_day, day_key, sum_by_day
from metrics.dashboard import InfraDashboard
from metrics.heatmap import build_cluster_usage, usage_fraction
from metrics.precision import round_fraction, round_whole
from metrics.providers import ProviderCapabilities, capabilities_for
from metrics.recent import recent_series
from metrics.rollups import TRAILING_WINDOW_DAYS, DailyMetricsCache, RollupSelector
from metrics.status import build_aggregate_status
from metrics.utilization import (
    build_utilization_points,
    utilization_points,
    utilization_series,
)

__all__ = [
    "DailyMetricsCache",
    "InfraDashboard",
    "ProviderCapabilities",
    "RollupSelector",
    "TRAILING_WINDOW_DAYS",
    "build_aggregate_status",
    "build_cluster_usage",
    "build_utilization_points",
    "capabilities_for",
    "count_by_day",
    "day_key",
    "recent_series",
    "round_fraction",
    "round_whole",
    "sum_by_day",
    "usage_fraction",
    "utilization_points",
    "utilization_series",
]
