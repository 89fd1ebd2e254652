from pydantic import BaseModel, Field

from models.enums import ProfileType

ALL_DAYS = list(range(7))
ALL_HOURS = list(range(24))


class TimeProfile(BaseModel):
    id: int
    description: str = Field(default="", max_length=256)
    profile_type: ProfileType = ProfileType.GLOBAL
    profile_key: str | None = Field(default=None, max_length=128)
    tz: str = Field(default="UTC", min_length=1, max_length=64)
    days: list[int] = Field(default_factory=lambda: list(ALL_DAYS))
    hours: list[int] = Field(default_factory=lambda: list(ALL_HOURS))
    rollup_daily_metrics: bool = True

    @property
    def covers_full_week(self) -> bool:
        return sorted(self.days) == ALL_DAYS and sorted(self.hours) == ALL_HOURS
