"""Day bucketing over timestamped records.

Buckets are plain ``dict[str, float]`` keyed by UTC ``YYYY-MM-DD``. A day is
present in a bucket only if at least one record carried a value for that
field, so "no data" and "zero" stay distinguishable.
"""

import logging
import math
from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from datetime import datetime, timezone
from operator import attrgetter
from typing import Any

from metrics.precision import finite_or_none

logger = logging.getLogger("dashboard")

DayBucket = dict[str, float]
Extractor = Callable[[Any], float | None]


def day_key(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d")


def has_resource(record: Any) -> bool:
    return getattr(record, "resource", True) is not None


def _extractors(fields: Mapping[str, Extractor] | Sequence[str]) -> dict[str, Extractor]:
    if isinstance(fields, Mapping):
        return dict(fields)
    return {name: attrgetter(name) for name in fields}


def sum_by_day(
    records: Iterable[Any],
    fields: Mapping[str, Extractor] | Sequence[str],
    timestamp: Callable[[Any], datetime] = attrgetter("timestamp"),
    resolved: Callable[[Any], bool] = has_resource,
) -> dict[str, DayBucket]:
    """Sum each extracted field per UTC day in a single pass.

    ``fields`` is either a list of attribute names or a mapping of output name
    to extractor. ``None`` and non-finite values contribute nothing. Records
    for which ``resolved`` is false are skipped entirely. Per-day sums use
    ``math.fsum`` so the result does not depend on input order.
    """

    extractors = _extractors(fields)
    collected: dict[str, dict[str, list[float]]] = {name: {} for name in extractors}
    skipped = 0

    for record in records:
        if not resolved(record):
            skipped += 1
            continue

        day = day_key(timestamp(record))
        for name, extract in extractors.items():
            value = finite_or_none(extract(record))
            if value is None:
                continue
            collected[name].setdefault(day, []).append(float(value))

    if skipped:
        logger.debug("unresolved_records_skipped", extra={"count": skipped})

    return {
        name: {day: math.fsum(days[day]) for day in sorted(days)}
        for name, days in collected.items()
    }


def count_by_day(
    records: Iterable[Any],
    timestamp: Callable[[Any], datetime] = attrgetter("created_on"),
    key: Callable[[Any], Hashable] = attrgetter("id"),
) -> dict[str, int]:
    """Count distinct records per UTC day of ``timestamp``, ordered by date."""

    seen: set[Hashable] = set()
    counts: dict[str, int] = {}

    for record in records:
        record_key = key(record)
        if record_key in seen:
            continue
        seen.add(record_key)

        day = day_key(timestamp(record))
        counts[day] = counts.get(day, 0) + 1

    return {day: counts[day] for day in sorted(counts)}
