from pydantic import BaseModel, Field


class Viewer(BaseModel):
    user_id: str = Field(min_length=1, max_length=128)
    timezone: str = Field(default="UTC", min_length=1, max_length=64)
