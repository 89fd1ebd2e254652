from datetime import datetime, timezone

import pytest

from db.repository import DashboardRepository
from models import ProfileType, TimeProfile


@pytest.fixture()
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def repo(tmp_path: pytest.TempPathFactory) -> DashboardRepository:
    repository = DashboardRepository(f"sqlite:///{tmp_path / 'dashboard-test.db'}")
    yield repository
    repository.close()


@pytest.fixture()
def default_profile(repo: DashboardRepository) -> TimeProfile:
    return repo.add_time_profile(
        TimeProfile(id=1, description="UTC", profile_type=ProfileType.GLOBAL, tz="UTC")
    )
