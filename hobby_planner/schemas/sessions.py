import math
from datetime import datetime

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


def coerce_capacity(value) -> int:
    """Turn any client-supplied capacity into a non-negative integer (garbage -> 0)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ---------- Session input ----------
class SessionUpdate(CamelModel):
    title: str
    description: str
    date: str
    time: str
    max_participants: int = 0
    type: str
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("max_participants", mode="before")
    @classmethod
    def _coerce_capacity(cls, value):
        return coerce_capacity(value)


class SessionCreate(SessionUpdate):
    management_code: str
    email: str | None = None


# ---------- Session output ----------
class SessionOut(CamelModel):
    """Public view: never carries the management code or creator email."""

    id: int
    title: str
    description: str
    date: str
    time: str
    max_participants: int
    type: str
    created_at: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    current_participants: int = 0


class ManagedSessionOut(SessionOut):
    management_code: str
    email: str | None = None


class SessionCreatedOut(ManagedSessionOut):
    message: str | None = None
