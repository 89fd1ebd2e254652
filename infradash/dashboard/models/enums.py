from enum import Enum


class ProviderFamily(str, Enum):
    VMWARE = "vmware"
    REDHAT = "redhat"
    OVIRT = "ovirt"
    MICROSOFT = "microsoft"
    KUBEVIRT = "kubevirt"
    OPENSTACK = "openstack"
    TELEFONICA = "telefonica"
    GENERIC = "generic"


class EntityKind(str, Enum):
    HOST = "HOST"
    VM = "VM"


class CaptureInterval(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"


class ProfileType(str, Enum):
    USER = "user"
    GLOBAL = "global"


class ResourceType(str, Enum):
    CLUSTER = "EmsCluster"
    MANAGER = "ExtManagementSystem"
