from pydantic import Field

from models import (
    AggregateStatus,
    CamelModel,
    EmsUtilization,
    Heatmaps,
    RecentSeries,
)


class HeatmapResponse(CamelModel):
    heatmaps: Heatmaps


class EmsUtilizationResponse(CamelModel):
    ems_utilization: EmsUtilization = Field(alias="ems_utilization")


class RecentHostsResponse(CamelModel):
    recent_hosts: RecentSeries


class RecentVmsResponse(CamelModel):
    recent_vms: RecentSeries


class AggregateStatusResponse(CamelModel):
    agg_status: AggregateStatus
