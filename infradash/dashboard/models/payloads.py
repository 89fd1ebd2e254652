from pydantic import Field

from models.base import CamelModel
from models.usage import ClusterUsageEntry


class Heatmaps(CamelModel):
    cluster_cpu_usage: list[ClusterUsageEntry] | None = None
    cluster_memory_usage: list[ClusterUsageEntry] | None = None
    title: str


class UsageSummary(CamelModel):
    used: int | None = None
    total: int | None = None


class EmsUtilization(CamelModel):
    data_available: bool
    dates: list[str] = Field(default_factory=list)
    used_cpu: list[int | None] = Field(default_factory=list)
    total_cpu: list[int | None] = Field(default_factory=list)
    used_mem: list[int | None] = Field(default_factory=list)
    total_mem: list[int | None] = Field(default_factory=list)
    cpu_percent: list[float | None] = Field(default_factory=list)
    mem_percent: list[float | None] = Field(default_factory=list)
    cpu: UsageSummary | None = None
    memory: UsageSummary | None = None


class ChartConfig(CamelModel):
    title: str
    label: str


class RecentSeries(CamelModel):
    data_available: bool
    x_data: list[str] | None = None
    y_data: list[int] | None = None
    config: ChartConfig


class Notification(CamelModel):
    icon_class: str
    count: int = Field(default=0, ge=0)


class AttributeStatus(CamelModel):
    id: str
    icon_class: str
    title: str
    count: int = Field(ge=0)
    href: str
    notification: Notification


class StatusIcon(CamelModel):
    icon_image: str
    large_icon: bool = True


class AggregateStatus(CamelModel):
    status: StatusIcon
    attr_data: list[AttributeStatus] = Field(default_factory=list)
