from collections.abc import Iterable

from metrics.buckets import count_by_day
from models import ChartConfig, CreationRecord, RecentSeries


def recent_series(records: Iterable[CreationRecord], config: ChartConfig) -> RecentSeries:
    counts = count_by_day(records)
    if not counts:
        return RecentSeries(data_available=False, config=config)

    return RecentSeries(
        data_available=True,
        x_data=list(counts),
        y_data=list(counts.values()),
        config=config,
    )
