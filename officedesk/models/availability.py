# officedesk/models/availability.py
import re
from datetime import date
from typing import Dict, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# "HH:MM" 24h
TIME_RE = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


def to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _require_time(value: str) -> str:
    if not isinstance(value, str) or not TIME_RE.match(value):
        raise ValueError(f"hora inválida {value!r}, se espera HH:MM")
    return value


class TimeSlot(NamedTuple):
    """Hueco reservable, en hora local de la oficina."""
    start: str
    end: str


class SlotRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str
    granularity_minutes: Optional[int] = Field(default=None, alias="granularityMinutes", gt=0)

    @field_validator("start", "end")
    @classmethod
    def _bounds(cls, v):
        return _require_time(v)

    @model_validator(mode="after")
    def _ordered(self):
        if to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError("end debe ser posterior a start")
        return self


class DaySchedule(BaseModel):
    """
    Horario de un día. Acepta tres formas:
      {"available": true, "slots": ["09:00", "10:00"]}
      {"available": true, "slots": {"start": "09:00", "end": "12:00", "granularityMinutes": 30}}
      {"available": true, "start": "09:00", "end": "17:00"}   (usa slotDuration de la oficina)
    """
    model_config = ConfigDict(populate_by_name=True)

    available: bool = False
    slots: Optional[Union[List[str], SlotRange]] = None
    start: Optional[str] = None
    end: Optional[str] = None

    @field_validator("slots")
    @classmethod
    def _slot_strings(cls, v):
        if isinstance(v, list):
            for s in v:
                _require_time(s)
        return v

    @field_validator("start", "end")
    @classmethod
    def _bounds(cls, v):
        return v if v is None else _require_time(v)

    @model_validator(mode="after")
    def _hours_pair(self):
        if (self.start is None) != (self.end is None):
            raise ValueError("start y end deben indicarse juntos")
        if self.start is not None and to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError("end debe ser posterior a start")
        return self


class UnavailableDateRange(BaseModel):
    start: date
    end: date
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _ordered(self):
        if self.end < self.start:
            raise ValueError("el rango termina antes de empezar")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class OfficeAvailabilityConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    office_id: Optional[str] = Field(default=None, alias="officeId")
    # 0 = domingo ... 6 = sábado
    default_schedule: Dict[int, DaySchedule] = Field(default_factory=dict, alias="defaultSchedule")
    slot_duration: int = Field(default=30, alias="slotDuration", gt=0)
    unavailable_dates: List[date] = Field(default_factory=list, alias="unavailableDates")
    unavailable_date_ranges: List[UnavailableDateRange] = Field(default_factory=list, alias="unavailableDateRanges")
    date_overrides: Dict[date, DaySchedule] = Field(default_factory=dict, alias="dateOverrides")

    @field_validator("default_schedule")
    @classmethod
    def _weekday_keys(cls, v):
        bad = [k for k in v if not 0 <= k <= 6]
        if bad:
            raise ValueError(f"día de la semana fuera de rango: {bad}")
        return v


def default_schedule() -> Dict[int, DaySchedule]:
    """Lunes a viernes 09:00-17:00; fin de semana cerrado."""
    sched = {d: DaySchedule(available=True, start="09:00", end="17:00") for d in range(1, 6)}
    sched[0] = DaySchedule(available=False, start="09:00", end="17:00")
    sched[6] = DaySchedule(available=False, start="09:00", end="17:00")
    return sched
