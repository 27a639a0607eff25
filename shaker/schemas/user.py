from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator


class UserCreate(BaseModel):
    external_id: Optional[str] = None
    display_name: str

    @field_validator("display_name")
    @classmethod
    def display_name_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Display name must not be empty")
        return v


class UserRecord(BaseModel):
    id: int
    external_id: Optional[str]
    display_name: str
    created_at: datetime

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values; they are stored as UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class ImportSummary(BaseModel):
    imported: int = 0
    failed: int = 0
