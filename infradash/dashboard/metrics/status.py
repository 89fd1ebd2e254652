from metrics.providers import ProviderCapabilities
from models import (
    AggregateStatus,
    AttributeStatus,
    InfraManager,
    InventoryCounts,
    Notification,
    StatusIcon,
)

_ATTRIBUTES = ("ems_clusters", "hosts", "storages", "vms", "miq_templates")

_ICONS = {
    "ems_clusters": "pficon pficon-cluster",
    "hosts": "pficon pficon-container-node",
    "storages": "fa fa-database",
    "vms": "pficon pficon-virtual-machine",
    "miq_templates": "pficon pficon-virtual-machine",
}

_NOTIFICATION_ICON = "pficon pficon-error-circle-o"


def _titles(capabilities: ProviderCapabilities) -> dict[str, str]:
    return {
        "ems_clusters": capabilities.cluster_label,
        "hosts": capabilities.host_label,
        "storages": "Datastores",
        "vms": "VMs",
        "miq_templates": "Templates",
    }


def manager_url(ems_id: int, display: str) -> str:
    return f"/ems_infra/{ems_id}?display={display}"


def build_aggregate_status(
    manager: InfraManager,
    counts: InventoryCounts,
    capabilities: ProviderCapabilities,
) -> AggregateStatus:
    titles = _titles(capabilities)
    attr_data = [
        AttributeStatus(
            id=f"{titles[attr]}_{manager.id}",
            icon_class=_ICONS[attr],
            title=titles[attr],
            count=getattr(counts, attr),
            href=manager_url(manager.id, attr),
            notification=Notification(icon_class=_NOTIFICATION_ICON, count=0),
        )
        for attr in _ATTRIBUTES
    ]
    return AggregateStatus(
        status=StatusIcon(icon_image=capabilities.icon_image, large_icon=True),
        attr_data=attr_data,
    )
