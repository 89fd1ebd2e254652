from dataclasses import dataclass, replace

from models import ProviderFamily


@dataclass(frozen=True, slots=True)
class ProviderCapabilities:
    cluster_label: str
    host_label: str
    heatmap_title: str
    recent_hosts_title: str
    icon_image: str


_DEFAULT = ProviderCapabilities(
    cluster_label="Clusters",
    host_label="Hosts",
    heatmap_title="Cluster Utilization",
    recent_hosts_title="Recent Hosts",
    icon_image="/assets/svg/vendor-generic.svg",
)

# Families that model clusters as deployment roles and hosts as nodes.
_DEPLOYMENT_ROLE_FAMILIES = frozenset({ProviderFamily.OPENSTACK, ProviderFamily.TELEFONICA})


def capabilities_for(family: ProviderFamily | None) -> ProviderCapabilities:
    if family is None:
        return _DEFAULT

    capabilities = replace(_DEFAULT, icon_image=f"/assets/svg/vendor-{family.value}.svg")
    if family in _DEPLOYMENT_ROLE_FAMILIES:
        capabilities = replace(
            capabilities,
            cluster_label="Deployment Roles",
            host_label="Nodes",
            heatmap_title="Deployment Roles Utilization",
            recent_hosts_title="Recent Nodes",
        )
    return capabilities
