import json
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import and_, case, create_engine, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from db.migrate import apply_migrations
from db.orm import (
    ClusterRecord,
    HostRecord,
    ManagerRecord,
    MetricRollupRecord,
    StorageRecord,
    TimeProfileRecord,
    VmRecord,
)
from models import (
    CaptureInterval,
    CreationRecord,
    EntityKind,
    InfraManager,
    InventoryCounts,
    MetricSample,
    ProfileType,
    ProviderFamily,
    RecordNotFound,
    ResourceRef,
    ResourceType,
    TimeProfile,
    UpstreamUnavailable,
)

logger = logging.getLogger("dashboard")

DEFAULT_PROFILE_TZ = "UTC"

_METRIC_FIELDS = (
    "cpu_usage_rate_average",
    "mem_usage_absolute_average",
    "derived_vm_numvcpus",
    "v_derived_cpu_total_cores_used",
    "derived_memory_available",
    "derived_memory_used",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _provider_family(raw: str | None) -> ProviderFamily:
    try:
        return ProviderFamily(raw)
    except ValueError:
        return ProviderFamily.GENERIC


class DashboardRepository:
    """Read side of the rollup, time-profile and inventory stores.

    Reads are wrapped so that any driver or SQL failure surfaces as
    ``UpstreamUnavailable``; nothing here retries. The ``upsert_*``/``add_*``
    writers exist for seeding and tests, rollups are otherwise produced
    upstream.
    """

    def __init__(self, db_url: str) -> None:
        apply_migrations(db_url)
        self._engine = create_engine(
            db_url,
            future=True,
            connect_args={"check_same_thread": False},
        )
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )

    @contextmanager
    def _reading(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error(
                "store_read_failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise UpstreamUnavailable(f"{operation} failed") from exc

    def _to_manager(self, row: ManagerRecord) -> InfraManager:
        return InfraManager(
            id=row.id,
            name=row.name,
            provider_family=_provider_family(row.provider_family),
        )

    def _to_profile(self, row: TimeProfileRecord) -> TimeProfile:
        return TimeProfile(
            id=row.id,
            description=row.description,
            profile_type=ProfileType(row.profile_type),
            profile_key=row.profile_key,
            tz=row.tz,
            days=json.loads(row.days_json),
            hours=json.loads(row.hours_json),
            rollup_daily_metrics=bool(row.rollup_daily_metrics),
        )

    def _to_sample(
        self, row: MetricRollupRecord, resource: ResourceRef | None
    ) -> MetricSample:
        return MetricSample(
            id=row.id,
            resource_type=ResourceType(row.resource_type),
            resource_id=row.resource_id,
            resource=resource,
            capture_interval_name=CaptureInterval(row.capture_interval_name),
            time_profile_id=row.time_profile_id,
            timestamp=_as_utc(row.timestamp),
            **{field: getattr(row, field) for field in _METRIC_FIELDS},
        )

    def _resolve_resources(
        self, session: Session, resource_type: ResourceType, ids: set[int]
    ) -> dict[int, ResourceRef]:
        if not ids:
            return {}

        if resource_type == ResourceType.CLUSTER:
            rows = session.execute(
                select(ClusterRecord, ManagerRecord)
                .outerjoin(ManagerRecord, ManagerRecord.id == ClusterRecord.ems_id)
                .where(ClusterRecord.id.in_(ids))
            ).all()
            return {
                cluster.id: ResourceRef(
                    id=cluster.id,
                    name=cluster.name,
                    ems_id=cluster.ems_id,
                    ems_name=manager.name if manager is not None else None,
                )
                for cluster, manager in rows
            }

        managers = session.scalars(
            select(ManagerRecord).where(ManagerRecord.id.in_(ids))
        ).all()
        return {
            row.id: ResourceRef(id=row.id, name=row.name, ems_id=row.id, ems_name=row.name)
            for row in managers
        }

    def find_manager(self, ems_id: int) -> InfraManager:
        with self._reading("find_manager") as session:
            row = session.get(ManagerRecord, ems_id)
            if row is None:
                raise RecordNotFound("ExtManagementSystem", ems_id)
            return self._to_manager(row)

    def manager_ids(self) -> list[int]:
        with self._reading("manager_ids") as session:
            return list(
                session.scalars(
                    select(ManagerRecord.id).order_by(ManagerRecord.id.asc())
                ).all()
            )

    def cluster_ids_for_manager(self, ems_id: int) -> list[int]:
        with self._reading("cluster_ids_for_manager") as session:
            return list(
                session.scalars(
                    select(ClusterRecord.id)
                    .where(ClusterRecord.ems_id == ems_id)
                    .order_by(ClusterRecord.id.asc())
                ).all()
            )

    def latest_rollups(
        self,
        resource_type: ResourceType,
        resource_ids: Iterable[int] | None,
        since: datetime,
        interval: CaptureInterval = CaptureInterval.HOURLY,
    ) -> list[MetricSample]:
        """Return the newest rollup per resource with ``timestamp > since``.

        ``resource_ids=None`` means every resource of ``resource_type``. Ties on
        timestamp are broken by the higher rollup id.
        """

        filters = [
            MetricRollupRecord.resource_type == resource_type.value,
            MetricRollupRecord.capture_interval_name == interval.value,
            MetricRollupRecord.timestamp > _as_utc(since),
        ]
        if resource_ids is not None:
            ids = list(resource_ids)
            if not ids:
                return []
            filters.append(MetricRollupRecord.resource_id.in_(ids))

        ranked = (
            select(
                MetricRollupRecord.id.label("rollup_id"),
                func.row_number()
                .over(
                    partition_by=MetricRollupRecord.resource_id,
                    order_by=(
                        MetricRollupRecord.timestamp.desc(),
                        MetricRollupRecord.id.desc(),
                    ),
                )
                .label("position"),
            )
            .where(*filters)
            .subquery()
        )

        with self._reading("latest_rollups") as session:
            rows = session.scalars(
                select(MetricRollupRecord)
                .join(ranked, ranked.c.rollup_id == MetricRollupRecord.id)
                .where(ranked.c.position == 1)
                .order_by(MetricRollupRecord.resource_id.asc())
            ).all()
            resources = self._resolve_resources(
                session, resource_type, {row.resource_id for row in rows}
            )
            return [self._to_sample(row, resources.get(row.resource_id)) for row in rows]

    def daily_rollups(
        self,
        time_profile: TimeProfile,
        resource_ids: Iterable[int],
        since: datetime,
    ) -> list[MetricSample]:
        ids = list(resource_ids)
        if not ids:
            return []

        with self._reading("daily_rollups") as session:
            rows = session.scalars(
                select(MetricRollupRecord)
                .where(
                    MetricRollupRecord.resource_type == ResourceType.MANAGER.value,
                    MetricRollupRecord.capture_interval_name
                    == CaptureInterval.DAILY.value,
                    MetricRollupRecord.time_profile_id == time_profile.id,
                    MetricRollupRecord.resource_id.in_(ids),
                    MetricRollupRecord.timestamp > _as_utc(since),
                )
                .order_by(
                    MetricRollupRecord.timestamp.asc(), MetricRollupRecord.id.asc()
                )
            ).all()
            resources = self._resolve_resources(
                session, ResourceType.MANAGER, {row.resource_id for row in rows}
            )
            return [self._to_sample(row, resources.get(row.resource_id)) for row in rows]

    def profile_for_user(self, user_id: str, tz: str) -> TimeProfile | None:
        """Full-week daily profile for ``tz``; the user's own wins over a global one."""

        with self._reading("profile_for_user") as session:
            rows = session.scalars(
                select(TimeProfileRecord)
                .where(
                    TimeProfileRecord.tz == tz,
                    TimeProfileRecord.rollup_daily_metrics == 1,
                    or_(
                        TimeProfileRecord.profile_type == ProfileType.GLOBAL.value,
                        and_(
                            TimeProfileRecord.profile_type == ProfileType.USER.value,
                            TimeProfileRecord.profile_key == user_id,
                        ),
                    ),
                )
                .order_by(
                    case(
                        (TimeProfileRecord.profile_type == ProfileType.USER.value, 0),
                        else_=1,
                    ),
                    TimeProfileRecord.id.asc(),
                )
            ).all()
            profiles = [self._to_profile(row) for row in rows]
            return next((p for p in profiles if p.covers_full_week), None)

    def default_profile(self, tz: str = DEFAULT_PROFILE_TZ) -> TimeProfile | None:
        with self._reading("default_profile") as session:
            rows = session.scalars(
                select(TimeProfileRecord)
                .where(
                    TimeProfileRecord.tz == tz,
                    TimeProfileRecord.profile_type == ProfileType.GLOBAL.value,
                    TimeProfileRecord.rollup_daily_metrics == 1,
                )
                .order_by(TimeProfileRecord.id.asc())
            ).all()
            profiles = [self._to_profile(row) for row in rows]
            return next((p for p in profiles if p.covers_full_week), None)

    def records_created_since(
        self, kind: EntityKind, owner_id: int | None, since: datetime
    ) -> list[CreationRecord]:
        record = HostRecord if kind == EntityKind.HOST else VmRecord
        stmt = (
            select(record.id, record.created_on)
            .where(record.created_on > _as_utc(since))
            .order_by(record.created_on.asc(), record.id.asc())
        )
        if owner_id is not None:
            stmt = stmt.where(record.ems_id == owner_id)

        with self._reading("records_created_since") as session:
            return [
                CreationRecord(id=row_id, created_on=_as_utc(created_on))
                for row_id, created_on in session.execute(stmt).all()
            ]

    def inventory_counts(self, ems_id: int) -> InventoryCounts:
        def _count(session: Session, record: type, *criteria: object) -> int:
            return int(
                session.scalar(
                    select(func.count(record.id)).where(record.ems_id == ems_id, *criteria)
                )
                or 0
            )

        with self._reading("inventory_counts") as session:
            return InventoryCounts(
                ems_clusters=_count(session, ClusterRecord),
                hosts=_count(session, HostRecord),
                storages=_count(session, StorageRecord),
                vms=_count(session, VmRecord, VmRecord.template == 0),
                miq_templates=_count(session, VmRecord, VmRecord.template == 1),
            )

    def upsert_manager(
        self,
        ems_id: int,
        name: str,
        provider_family: ProviderFamily = ProviderFamily.GENERIC,
    ) -> InfraManager:
        with self._session_factory.begin() as session:
            row = session.get(ManagerRecord, ems_id)
            if row is None:
                row = ManagerRecord(id=ems_id, created_on=_utc_now())
                session.add(row)
            row.name = name
            row.provider_family = provider_family.value
            session.flush()
            return self._to_manager(row)

    def upsert_cluster(self, cluster_id: int, name: str, ems_id: int | None) -> None:
        with self._session_factory.begin() as session:
            row = session.get(ClusterRecord, cluster_id)
            if row is None:
                row = ClusterRecord(id=cluster_id, created_on=_utc_now())
                session.add(row)
            row.name = name
            row.ems_id = ems_id

    def delete_cluster(self, cluster_id: int) -> None:
        with self._session_factory.begin() as session:
            session.execute(delete(ClusterRecord).where(ClusterRecord.id == cluster_id))

    def upsert_host(
        self,
        host_id: int,
        name: str,
        ems_id: int | None,
        created_on: datetime | None = None,
    ) -> None:
        with self._session_factory.begin() as session:
            row = session.get(HostRecord, host_id)
            if row is None:
                row = HostRecord(id=host_id)
                session.add(row)
            row.name = name
            row.ems_id = ems_id
            row.created_on = _as_utc(created_on) or _utc_now()

    def upsert_vm(
        self,
        vm_id: int,
        name: str,
        ems_id: int | None,
        created_on: datetime | None = None,
        template: bool = False,
    ) -> None:
        with self._session_factory.begin() as session:
            row = session.get(VmRecord, vm_id)
            if row is None:
                row = VmRecord(id=vm_id)
                session.add(row)
            row.name = name
            row.ems_id = ems_id
            row.template = 1 if template else 0
            row.created_on = _as_utc(created_on) or _utc_now()

    def upsert_storage(self, storage_id: int, name: str, ems_id: int | None) -> None:
        with self._session_factory.begin() as session:
            row = session.get(StorageRecord, storage_id)
            if row is None:
                row = StorageRecord(id=storage_id)
                session.add(row)
            row.name = name
            row.ems_id = ems_id

    def add_time_profile(self, profile: TimeProfile | dict[str, object]) -> TimeProfile:
        payload = TimeProfile.model_validate(profile)
        with self._session_factory.begin() as session:
            row = TimeProfileRecord(
                id=payload.id,
                description=payload.description,
                profile_type=payload.profile_type.value,
                profile_key=payload.profile_key,
                tz=payload.tz,
                days_json=json.dumps(payload.days),
                hours_json=json.dumps(payload.hours),
                rollup_daily_metrics=1 if payload.rollup_daily_metrics else 0,
            )
            session.add(row)
            session.flush()
            return self._to_profile(row)

    def add_rollup(
        self,
        resource_type: ResourceType,
        resource_id: int,
        timestamp: datetime,
        capture_interval: CaptureInterval = CaptureInterval.HOURLY,
        time_profile_id: int | None = None,
        **values: float | None,
    ) -> int:
        unknown = set(values) - set(_METRIC_FIELDS)
        if unknown:
            raise ValueError(f"Unknown rollup fields: {sorted(unknown)}")

        with self._session_factory.begin() as session:
            row = MetricRollupRecord(
                resource_type=resource_type.value,
                resource_id=resource_id,
                capture_interval_name=capture_interval.value,
                time_profile_id=time_profile_id,
                timestamp=_as_utc(timestamp),
                **values,
            )
            session.add(row)
            session.flush()
            return row.id

    def close(self) -> None:
        self._engine.dispose()


_default_repository: DashboardRepository | None = None


def init_repository(db_url: str) -> DashboardRepository:
    global _default_repository
    _default_repository = DashboardRepository(db_url=db_url)
    return _default_repository


def get_repository() -> DashboardRepository:
    if _default_repository is None:
        raise RuntimeError("Repository is not initialized")
    return _default_repository


def close_repository() -> None:
    global _default_repository
    if _default_repository is not None:
        _default_repository.close()
        _default_repository = None
