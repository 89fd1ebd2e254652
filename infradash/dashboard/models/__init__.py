from models.base import CamelModel
from models.enums import (
    CaptureInterval,
    EntityKind,
    ProfileType,
    ProviderFamily,
    ResourceType,
)
from models.errors import ConfigurationError, RecordNotFound, UpstreamUnavailable
from models.inventory import CreationRecord, InfraManager, InventoryCounts, ResourceRef
from models.metric import MetricSample
from models.payloads import (
    AggregateStatus,
    AttributeStatus,
    ChartConfig,
    EmsUtilization,
    Heatmaps,
    Notification,
    RecentSeries,
    StatusIcon,
    UsageSummary,
)
from models.time_profile import TimeProfile
from models.usage import ClusterUsageEntry, UtilizationPoint
from models.viewer import Viewer

__all__ = [
    "AggregateStatus",
    "AttributeStatus",
    "CamelModel",
    "CaptureInterval",
    "ChartConfig",
    "ClusterUsageEntry",
    "ConfigurationError",
    "CreationRecord",
    "EmsUtilization",
    "EntityKind",
    "Heatmaps",
    "InfraManager",
    "InventoryCounts",
    "MetricSample",
    "Notification",
    "ProfileType",
    "ProviderFamily",
    "RecentSeries",
    "RecordNotFound",
    "ResourceRef",
    "ResourceType",
    "StatusIcon",
    "TimeProfile",
    "UpstreamUnavailable",
    "UsageSummary",
    "UtilizationPoint",
    "Viewer",
]
