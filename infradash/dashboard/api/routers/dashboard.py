from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request

from api.auth import current_viewer
from api.schemas import (
    AggregateStatusResponse,
    EmsUtilizationResponse,
    HeatmapResponse,
    RecentHostsResponse,
    RecentVmsResponse,
)
from db import get_repository
from metrics import InfraDashboard
from models import RecordNotFound, Viewer

router = APIRouter(prefix="/v1/ems-infra/dashboard", tags=["dashboard"])


def _dashboard(request: Request, ems_id: int | None, viewer: Viewer) -> InfraDashboard:
    try:
        return InfraDashboard(
            get_repository(),
            viewer,
            ems_id=ems_id,
            window_days=request.app.state.settings.trailing_window_days,
        )
    except RecordNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/cluster-heatmap", response_model=HeatmapResponse)
def cluster_heatmap(
    request: Request,
    ems_id: int | None = Query(default=None, ge=1),
    viewer: Viewer = Depends(current_viewer),
) -> HeatmapResponse:
    """Latest CPU and memory usage per cluster.

    Example response:
    {
      "heatmaps": {
        "clusterCpuUsage": [
          {"clusterId": 7, "clusterName": "prod", "providerName": "vc-1",
           "unit": "Cores", "total": 64, "percent": 0.88}
        ],
        "clusterMemoryUsage": [...],
        "title": "Cluster Utilization"
      }
    }
    """

    dashboard = _dashboard(request, ems_id, viewer)
    return HeatmapResponse(heatmaps=dashboard.cluster_heatmap_data())


@router.get("/utilization", response_model=EmsUtilizationResponse)
def ems_utilization(
    request: Request,
    ems_id: int | None = Query(default=None, ge=1),
    viewer: Viewer = Depends(current_viewer),
) -> EmsUtilizationResponse:
    """Daily used/total CPU cores and memory GB over the trailing window."""

    dashboard = _dashboard(request, ems_id, viewer)
    return EmsUtilizationResponse(ems_utilization=dashboard.ems_utilization_data())


@router.get(
    "/recent-hosts",
    response_model=RecentHostsResponse,
    response_model_exclude_none=True,
)
def recent_hosts(
    request: Request,
    ems_id: int | None = Query(default=None, ge=1),
    viewer: Viewer = Depends(current_viewer),
) -> RecentHostsResponse:
    """Hosts created per day over the trailing window."""

    dashboard = _dashboard(request, ems_id, viewer)
    return RecentHostsResponse(recent_hosts=dashboard.recent_hosts_data())


@router.get(
    "/recent-vms",
    response_model=RecentVmsResponse,
    response_model_exclude_none=True,
)
def recent_vms(
    request: Request,
    ems_id: int | None = Query(default=None, ge=1),
    viewer: Viewer = Depends(current_viewer),
) -> RecentVmsResponse:
    """VMs and templates created per day over the trailing window."""

    dashboard = _dashboard(request, ems_id, viewer)
    return RecentVmsResponse(recent_vms=dashboard.recent_vms_data())


@router.get("/{ems_id}/aggregate-status", response_model=AggregateStatusResponse)
def aggregate_status(
    request: Request,
    ems_id: int = Path(ge=1),
    viewer: Viewer = Depends(current_viewer),
) -> AggregateStatusResponse:
    """Inventory counts and links for a single manager."""

    dashboard = _dashboard(request, ems_id, viewer)
    return AggregateStatusResponse(agg_status=dashboard.aggregate_status_data())
