from datetime import datetime, timedelta

import pytest

from db.repository import DashboardRepository
from metrics import DailyMetricsCache, RollupSelector
from models import (
    CaptureInterval,
    ConfigurationError,
    InfraManager,
    ProfileType,
    ProviderFamily,
    ResourceType,
    TimeProfile,
    Viewer,
)


def test_viewer_profile_is_preferred(repo: DashboardRepository, default_profile) -> None:
    repo.add_time_profile(
        TimeProfile(id=2, profile_type=ProfileType.USER, profile_key="42", tz="UTC")
    )

    mine = RollupSelector(repo, Viewer(user_id="42", timezone="UTC")).resolve_time_profile()
    other = RollupSelector(repo, Viewer(user_id="7", timezone="UTC")).resolve_time_profile()

    assert mine.id == 2
    assert other.id == default_profile.id


def test_partial_viewer_profile_is_not_used(
    repo: DashboardRepository, default_profile
) -> None:
    business_hours = TimeProfile(
        id=2,
        profile_type=ProfileType.USER,
        profile_key="42",
        tz="UTC",
        hours=list(range(9, 17)),
    )
    repo.add_time_profile(business_hours)

    profile = RollupSelector(repo, Viewer(user_id="42", timezone="UTC")).resolve_time_profile()

    assert profile.id == default_profile.id
    assert profile.covers_full_week


def test_falls_back_to_default_profile(repo: DashboardRepository) -> None:
    repo.add_time_profile(
        TimeProfile(id=1, profile_type=ProfileType.GLOBAL, tz="UTC", days=[1, 2, 3, 4, 5])
    )
    repo.add_time_profile(TimeProfile(id=2, profile_type=ProfileType.GLOBAL, tz="UTC"))

    selector = RollupSelector(repo, Viewer(user_id="42", timezone="Europe/Berlin"))

    assert selector.resolve_time_profile().id == 2


def test_missing_profiles_are_a_configuration_error(repo: DashboardRepository) -> None:
    selector = RollupSelector(repo, Viewer(user_id="42", timezone="UTC"))

    with pytest.raises(ConfigurationError):
        selector.resolve_time_profile()


def test_profile_without_daily_rollups_is_ignored(repo: DashboardRepository) -> None:
    repo.add_time_profile(
        TimeProfile(id=1, profile_type=ProfileType.GLOBAL, tz="UTC", rollup_daily_metrics=False)
    )

    with pytest.raises(ConfigurationError):
        RollupSelector(repo, Viewer(user_id="1")).resolve_time_profile()


def test_daily_rollups_for_scope_within_window(
    repo: DashboardRepository, default_profile, now: datetime
) -> None:
    scope = repo.upsert_manager(1, "vcenter-1", ProviderFamily.VMWARE)
    repo.upsert_manager(2, "rhv", ProviderFamily.REDHAT)
    other_profile = repo.add_time_profile(
        TimeProfile(id=9, profile_type=ProfileType.GLOBAL, tz="Asia/Tokyo")
    )

    def daily(resource_id: int, days_ago: int, profile_id: int = default_profile.id) -> int:
        return repo.add_rollup(
            ResourceType.MANAGER,
            resource_id,
            now - timedelta(days=days_ago),
            capture_interval=CaptureInterval.DAILY,
            time_profile_id=profile_id,
            derived_vm_numvcpus=4.0,
        )

    newest = daily(1, 1)
    oldest = daily(1, 29)
    daily(1, 31)
    daily(1, 2, profile_id=other_profile.id)
    daily(2, 3)
    repo.add_rollup(ResourceType.MANAGER, 1, now - timedelta(days=1))

    selector = RollupSelector(repo, Viewer(user_id="42"), now=now)
    scoped = selector.daily_rollups(scope)
    unscoped = selector.daily_rollups(None)

    assert [sample.id for sample in scoped] == [oldest, newest]
    assert all(sample.capture_interval_name == CaptureInterval.DAILY for sample in scoped)
    assert len(unscoped) == 3
    assert [sample.timestamp for sample in unscoped] == sorted(
        sample.timestamp for sample in unscoped
    )


def test_latest_cluster_rollups_scoped_to_manager_clusters(
    repo: DashboardRepository, now: datetime
) -> None:
    repo.upsert_manager(1, "vcenter-1", ProviderFamily.VMWARE)
    repo.upsert_cluster(10, "prod", ems_id=1)
    repo.upsert_cluster(20, "elsewhere", ems_id=2)
    repo.add_rollup(ResourceType.CLUSTER, 10, now - timedelta(hours=1))
    repo.add_rollup(ResourceType.CLUSTER, 20, now - timedelta(hours=1))

    selector = RollupSelector(repo, Viewer(user_id="42"), now=now)
    scope = InfraManager(id=1, name="vcenter-1")

    assert [s.resource_id for s in selector.latest_cluster_rollups(scope)] == [10]
    assert [s.resource_id for s in selector.latest_cluster_rollups(None)] == [10, 20]


def test_window_must_be_positive(repo: DashboardRepository) -> None:
    with pytest.raises(ValueError):
        RollupSelector(repo, Viewer(user_id="42"), window_days=0)


def test_daily_metrics_cache_loads_once() -> None:
    cache = DailyMetricsCache()
    calls: list[int] = []

    def loader() -> list:
        calls.append(1)
        return []

    assert cache.loaded is False
    assert cache.get_or_load(loader) == []
    assert cache.get_or_load(loader) == []
    assert len(calls) == 1
    assert cache.loads == 1
    assert cache.loaded is True


def test_daily_metrics_cache_does_not_keep_failures() -> None:
    cache = DailyMetricsCache()

    def failing() -> list:
        raise ConfigurationError("no profile")

    with pytest.raises(ConfigurationError):
        cache.get_or_load(failing)
    assert cache.loaded is False
    assert cache.get_or_load(lambda: []) == []
