# officedesk/services/lifecycle.py
"""
Reglas de ciclo de vida de solicitudes y citas.

Cada guarda devuelve un GuardResult (ok + código + motivo) en vez de lanzar:
una violación de regla de negocio es un resultado esperado que la capa HTTP
traduce a un mensaje concreto. Las excepciones quedan para entradas mal formadas.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from officedesk.models.common import (
    ALLOWED_APPOINTMENT_TRANSITIONS,
    EDITABLE_APPOINTMENT_STATES,
    TRACK_FIELDS,
    ApprovalStatus,
    AppointmentStatus,
)
from officedesk.services.approval import coerce_status, resolve_request
from officedesk.services import availability

REQUEST_NOT_APPROVED = "request_not_approved"
REQUEST_ALREADY_DECIDED = "request_already_decided"
TRACK_ALREADY_DECIDED = "track_already_decided"
APPOINTMENT_LOCKED = "appointment_locked"
APPOINTMENT_CLOSED = "appointment_closed"
INVALID_TRANSITION = "invalid_transition"
DATE_IN_PAST = "date_in_past"
NOT_A_WORKING_DAY = "not_a_working_day"
SLOT_UNAVAILABLE = "slot_unavailable"


@dataclass(frozen=True)
class GuardResult:
    ok: bool
    code: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(ok=True)

    @classmethod
    def deny(cls, code: str, reason: str) -> "GuardResult":
        return cls(ok=False, code=code, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class TrackUpdate:
    field: str
    value: ApprovalStatus
    before: ApprovalStatus
    after: ApprovalStatus

    @property
    def crossed(self) -> bool:
        """El estado global salió de pending con esta decisión."""
        return self.before is ApprovalStatus.PENDING and self.after is not ApprovalStatus.PENDING


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _track_field(track: str) -> str:
    try:
        return TRACK_FIELDS[track]
    except KeyError:
        raise ValueError(f"Pista de aprobación desconocida: {track!r}") from None


# ---- solicitudes ----

def can_create_appointment(request) -> GuardResult:
    if resolve_request(request) is ApprovalStatus.APPROVED:
        return GuardResult.allow()
    return GuardResult.deny(REQUEST_NOT_APPROVED, "request not approved")


def can_mutate_request(request) -> GuardResult:
    if resolve_request(request) is ApprovalStatus.PENDING:
        return GuardResult.allow()
    return GuardResult.deny(REQUEST_ALREADY_DECIDED, "request already decided")


def can_decide_track(request, track: str) -> GuardResult:
    current = coerce_status(_field(request, _track_field(track)))
    if current is ApprovalStatus.PENDING:
        return GuardResult.allow()
    return GuardResult.deny(TRACK_ALREADY_DECIDED, f"{track} track already decided")


def apply_track_decision(request, track: str, decision: str) -> TrackUpdate:
    field = _track_field(track)
    value = coerce_status(decision)
    if value is ApprovalStatus.PENDING:
        raise ValueError("Una decisión debe ser approved o rejected")

    staff = _field(request, "status_by_staff")
    admin = _field(request, "status_by_admin")
    before = resolve_request({"status_by_staff": staff, "status_by_admin": admin})
    if track == "staff":
        staff = value
    else:
        admin = value
    after = resolve_request({"status_by_staff": staff, "status_by_admin": admin})
    return TrackUpdate(field=field, value=value, before=before, after=after)


# ---- citas ----

def can_mutate_appointment(appointment) -> GuardResult:
    status = AppointmentStatus(_field(appointment, "status"))
    if status in EDITABLE_APPOINTMENT_STATES:
        return GuardResult.allow()
    if status in (AppointmentStatus.APPROVED, AppointmentStatus.COMPLETED):
        return GuardResult.deny(APPOINTMENT_LOCKED, "appointment already approved/completed")
    return GuardResult.deny(APPOINTMENT_CLOSED, "appointment already cancelled/rejected")


def can_transition_appointment(appointment, to_status) -> GuardResult:
    old = AppointmentStatus(_field(appointment, "status"))
    new = AppointmentStatus(to_status)
    if new in ALLOWED_APPOINTMENT_TRANSITIONS[old]:
        return GuardResult.allow()
    return GuardResult.deny(INVALID_TRANSITION, f"cannot move appointment from {old.value} to {new.value}")


def check_slot(
    config,
    day: date,
    time: Optional[str],
    existing_appointments: Iterable[Any],
    today: Optional[date] = None,
) -> GuardResult:
    """La fecha/hora pedida sigue libre según las citas que nos pasaron."""
    if today is not None and day < today:
        return GuardResult.deny(DATE_IN_PAST, "date is in the past")
    if not availability.is_open(day, config):
        return GuardResult.deny(NOT_A_WORKING_DAY, "office is closed on this date")
    if time is None:
        return GuardResult.allow()
    free = availability.available_slots(config, day, existing_appointments, today=today)
    if any(s.start == time for s in free):
        return GuardResult.allow()
    return GuardResult.deny(SLOT_UNAVAILABLE, "slot no longer available")
