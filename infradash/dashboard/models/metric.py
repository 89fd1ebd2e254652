from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.enums import CaptureInterval, ResourceType
from models.inventory import ResourceRef


class MetricSample(BaseModel):
    """A precomputed rollup row as read from the rollup store.

    Every numeric field is optional: ``None`` means the value was not measured
    for that period and must never be treated as zero. ``resource`` is ``None``
    when the cluster or manager the rollup belongs to has since been purged.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    resource_type: ResourceType
    resource_id: int
    resource: ResourceRef | None = None
    capture_interval_name: CaptureInterval
    time_profile_id: int | None = None
    timestamp: datetime

    cpu_usage_rate_average: float | None = None
    mem_usage_absolute_average: float | None = None
    derived_vm_numvcpus: float | None = None
    v_derived_cpu_total_cores_used: float | None = None
    derived_memory_available: float | None = None
    derived_memory_used: float | None = None
