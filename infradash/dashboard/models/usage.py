from pydantic import Field

from models.base import CamelModel


class UtilizationPoint(CamelModel):
    date: str
    used_cpu: int | None = None
    total_cpu: int | None = None
    used_mem: int | None = None
    total_mem: int | None = None
    cpu_percent: float | None = Field(default=None, ge=0)
    mem_percent: float | None = Field(default=None, ge=0)


class ClusterUsageEntry(CamelModel):
    cluster_id: int
    cluster_name: str
    provider_name: str | None = None
    unit: str
    total: int | None = None
    percent: float | None = Field(default=None, ge=0, le=1)
