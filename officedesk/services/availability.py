# officedesk/services/availability.py
"""
Motor de disponibilidad de oficinas.

Convierte el horario semanal declarativo de una oficina (más cierres puntuales
y excepciones por fecha) en días reservables y huecos libres. Funciones puras:
quien llama lee la configuración y las citas existentes y se las pasa.
"""
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Set, Union

from pydantic import ValidationError

from officedesk.models.availability import (
    TIME_RE,
    DaySchedule,
    OfficeAvailabilityConfig,
    SlotRange,
    TimeSlot,
    format_minutes,
    to_minutes,
)
from officedesk.models.common import AppointmentStatus, BLOCKING_APPOINTMENT_STATES

DEFAULT_LOOKAHEAD_DAYS = 14
LAST_MINUTE_OF_DAY = 23 * 60 + 59

ConfigInput = Union[OfficeAvailabilityConfig, Mapping[str, Any], None]


class ScheduleConfigError(ValueError):
    """La configuración de horario tiene una forma inválida."""


class NoWorkingDayFound(LookupError):
    """No hay ningún día laborable dentro de la ventana de búsqueda."""

    def __init__(self, from_date: date, lookahead: int):
        super().__init__(f"no working day found within {lookahead} days of {from_date.isoformat()}")
        self.from_date = from_date
        self.lookahead = lookahead


def weekday_index(day: date) -> int:
    """0 = domingo ... 6 = sábado."""
    return day.isoweekday() % 7


def is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(TIME_RE.match(value))


def parse_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValueError(f"Fecha inválida {value!r}, use YYYY-MM-DD")


def load_config(raw: ConfigInput) -> OfficeAvailabilityConfig:
    """
    Normaliza la configuración guardada de una oficina.

    Sin documento, o sin horario semanal, la oficina simplemente no tiene
    disponibilidad (config vacía). Cualquier otro error de forma es un error
    de integración y se reporta como ScheduleConfigError.
    """
    if isinstance(raw, OfficeAvailabilityConfig):
        return raw
    if not isinstance(raw, Mapping):
        return OfficeAvailabilityConfig()

    office_id = raw.get("officeId", raw.get("office_id"))
    if raw.get("defaultSchedule", raw.get("default_schedule")) is None:
        return OfficeAvailabilityConfig(office_id=office_id)

    data = {k: v for k, v in raw.items() if k != "_id"}
    try:
        return OfficeAvailabilityConfig.model_validate(data)
    except ValidationError as exc:
        raise ScheduleConfigError(f"Configuración de disponibilidad inválida: {exc}") from exc


def is_working_day(day: date, config: ConfigInput) -> bool:
    cfg = load_config(config)
    sched = cfg.default_schedule.get(weekday_index(day))
    return bool(sched is not None and sched.available)


def is_closed(day: date, config: ConfigInput) -> bool:
    """Cierre puntual: fecha marcada o dentro de un rango no disponible."""
    cfg = load_config(config)
    if day in cfg.unavailable_dates:
        return True
    return any(r.contains(day) for r in cfg.unavailable_date_ranges)


def schedule_for(day: date, config: ConfigInput) -> Optional[DaySchedule]:
    cfg = load_config(config)
    if is_closed(day, cfg):
        return None
    if day in cfg.date_overrides:
        return cfg.date_overrides[day]
    return cfg.default_schedule.get(weekday_index(day))


def is_open(day: date, config: ConfigInput) -> bool:
    sched = schedule_for(day, config)
    return bool(sched is not None and sched.available)


def next_working_day(from_date: date, config: ConfigInput, lookahead: int = DEFAULT_LOOKAHEAD_DAYS) -> date:
    """Primer día abierto desde from_date (incluido); NoWorkingDayFound si se agota la ventana."""
    cfg = load_config(config)
    for offset in range(lookahead):
        candidate = from_date + timedelta(days=offset)
        if is_open(candidate, cfg):
            return candidate
    raise NoWorkingDayFound(from_date, lookahead)


def expand_slots(schedule: DaySchedule, slot_duration: int) -> List[TimeSlot]:
    if not schedule.available:
        return []

    if isinstance(schedule.slots, list):
        return [
            TimeSlot(s, format_minutes(min(to_minutes(s) + slot_duration, LAST_MINUTE_OF_DAY)))
            for s in schedule.slots
        ]

    if isinstance(schedule.slots, SlotRange):
        start, end = schedule.slots.start, schedule.slots.end
        step = schedule.slots.granularity_minutes or slot_duration
    elif schedule.start is not None:
        start, end, step = schedule.start, schedule.end, slot_duration
    else:
        return []

    slots = []
    current, stop = to_minutes(start), to_minutes(end)
    # el último hueco tiene que caber entero antes del cierre
    while current + step <= stop:
        slots.append(TimeSlot(format_minutes(current), format_minutes(current + step)))
        current += step
    return slots


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def booked_times(existing_appointments: Iterable[Any]) -> Set[str]:
    """Horas ocupadas por citas pending/approved. Canceladas o rechazadas liberan el hueco."""
    taken = set()
    for appt in existing_appointments:
        time = _field(appt, "time")
        if not time:
            continue
        if AppointmentStatus(_field(appt, "status")) in BLOCKING_APPOINTMENT_STATES:
            taken.add(time)
    return taken


def available_slots(
    config: ConfigInput,
    day: date,
    existing_appointments: Iterable[Any] = (),
    today: Optional[date] = None,
) -> List[TimeSlot]:
    """
    Huecos libres de una oficina en una fecha.

    existing_appointments debe venir ya filtrado a esta oficina y fecha; cada
    elemento expone `time` y `status` (modelo o dict).
    """
    cfg = load_config(config)
    if today is not None and day < today:
        return []

    sched = schedule_for(day, cfg)
    if sched is None or not sched.available:
        return []

    taken = booked_times(existing_appointments)
    free = {s.start: s for s in expand_slots(sched, cfg.slot_duration) if s.start not in taken}
    return sorted(free.values(), key=lambda s: to_minutes(s.start))
