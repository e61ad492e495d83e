from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timestamps back without an offset; they were written in UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class EmployeeOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    department: str | None = None
    role: str | None = None


class EmployeeStatusOut(EmployeeOut):
    current_status: Literal["IN", "OUT"] | None = None
    last_event: UtcDatetime | None = None


class EnrichedLogOut(BaseModel):
    """A log entry joined with its employee's name and department."""

    model_config = {"from_attributes": True}

    id: int
    employee_id: int
    employee_name: str
    department: str | None = None
    type: Literal["IN", "OUT"]
    timestamp: UtcDatetime


class NewLogEvent(BaseModel):
    type: Literal["NEW_LOG"] = "NEW_LOG"
    data: EnrichedLogOut


class CheckOut(BaseModel):
    success: bool = True
    log: EnrichedLogOut
