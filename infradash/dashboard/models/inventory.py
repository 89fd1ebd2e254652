from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.enums import ProviderFamily


class InfraManager(BaseModel):
    id: int
    name: str = Field(min_length=1, max_length=256)
    provider_family: ProviderFamily = ProviderFamily.GENERIC


class ResourceRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    ems_id: int | None = None
    ems_name: str | None = None


class CreationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    created_on: datetime


class InventoryCounts(BaseModel):
    ems_clusters: int = Field(default=0, ge=0)
    hosts: int = Field(default=0, ge=0)
    storages: int = Field(default=0, ge=0)
    vms: int = Field(default=0, ge=0)
    miq_templates: int = Field(default=0, ge=0)
