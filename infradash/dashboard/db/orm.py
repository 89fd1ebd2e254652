from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ManagerRecord(Base):
    __tablename__ = "ext_management_systems"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    provider_family: Mapped[str] = mapped_column(String(32), nullable=False)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class ClusterRecord(Base):
    __tablename__ = "ems_clusters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    ems_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class HostRecord(Base):
    __tablename__ = "hosts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    ems_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class VmRecord(Base):
    __tablename__ = "vms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    ems_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    template: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class StorageRecord(Base):
    __tablename__ = "storages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    ems_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TimeProfileRecord(Base):
    __tablename__ = "time_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    description: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    profile_type: Mapped[str] = mapped_column(String(16), nullable=False)
    profile_key: Mapped[str | None] = mapped_column(String(128), nullable=True)
    tz: Mapped[str] = mapped_column(String(64), nullable=False)
    days_json: Mapped[str] = mapped_column(Text, nullable=False)
    hours_json: Mapped[str] = mapped_column(Text, nullable=False)
    rollup_daily_metrics: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )


class MetricRollupRecord(Base):
    __tablename__ = "metric_rollups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_type: Mapped[str] = mapped_column(String(64), nullable=False)
    resource_id: Mapped[int] = mapped_column(Integer, nullable=False)
    capture_interval_name: Mapped[str] = mapped_column(String(16), nullable=False)
    time_profile_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    cpu_usage_rate_average: Mapped[float | None] = mapped_column(Float, nullable=True)
    mem_usage_absolute_average: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )
    derived_vm_numvcpus: Mapped[float | None] = mapped_column(Float, nullable=True)
    v_derived_cpu_total_cores_used: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )
    derived_memory_available: Mapped[float | None] = mapped_column(
        Float, nullable=True
    )
    derived_memory_used: Mapped[float | None] = mapped_column(Float, nullable=True)
