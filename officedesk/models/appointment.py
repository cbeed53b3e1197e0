# officedesk/models/appointment.py
import datetime as dt
import uuid
from typing import Optional, Literal

from pydantic import BaseModel, Field, field_validator

from officedesk.models.common import AppointmentStatus
from officedesk.models.availability import TIME_RE


def _check_time(v):
    if v is None or v == "":
        return None
    if not isinstance(v, str) or not TIME_RE.match(v):
        raise ValueError("time debe tener formato HH:MM")
    return v


class AppointmentInDB(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    request_id: str
    office_id: str
    user_id: str
    date: dt.date
    time: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    staff_id: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
    updated_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

class AppointmentCreate(BaseModel):
    request_id: str
    date: dt.date
    time: Optional[str] = None
    notes: Optional[str] = None
    staff_id: Optional[str] = None

    @field_validator("time", mode="before")
    @classmethod
    def valid_time(cls, v):
        return _check_time(v)

class AppointmentUpdate(BaseModel):
    date: Optional[dt.date] = None
    time: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def date_not_null(cls, v):
        if v is None:
            raise ValueError("date no puede ser null; omita el campo para conservarla")
        return v

    @field_validator("time", mode="before")
    @classmethod
    def valid_time(cls, v):
        return _check_time(v)

class AppointmentDecisionPayload(BaseModel):
    action: Literal["approve", "reject"] = "approve"
    notes: Optional[str] = None
