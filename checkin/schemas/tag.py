from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class TagCreate(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "hackgt"})
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    warn_on_duplicates: bool = False

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("Tag name must not be empty")
        return value

    @field_validator("start", "end")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Dates without an offset are taken as UTC
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def check_window(self):
        # Either no window at all, or a complete one that moves forward in time
        if (self.start is None) != (self.end is None):
            raise ValueError("Both start and end must be set to give a tag a window")
        if self.start is not None and self.start >= self.end:
            raise ValueError("Tag start must be before its end")
        return self
