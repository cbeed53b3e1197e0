# officedesk/models/common.py
from enum import Enum
from typing import Literal


class ApprovalStatus(str, Enum):
    """Estado de una pista de aprobación (staff o admin) y estado global derivado."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AppointmentStatus(str, Enum):
    """
    Ciclo de vida de una cita.

    pending → approved → completed
        ↘ rejected   ↘ cancelled
        ↘ cancelled
    """

    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


ApprovalTrack = Literal["staff", "admin"]
ApprovalDecision = Literal["approved", "rejected"]

# campo del documento que guarda cada pista
TRACK_FIELDS = {
    "staff": "status_by_staff",
    "admin": "status_by_admin",
}

# el cliente solo puede editar/borrar en estos estados
EDITABLE_APPOINTMENT_STATES = frozenset({AppointmentStatus.PENDING})
# ocupan el hueco en la agenda
BLOCKING_APPOINTMENT_STATES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.APPROVED})
TERMINAL_APPOINTMENT_STATES = frozenset({
    AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.REJECTED,
})

ALLOWED_APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.APPROVED, AppointmentStatus.REJECTED, AppointmentStatus.CANCELLED},
    AppointmentStatus.APPROVED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.REJECTED: set(),
}

Role = Literal["customer", "staff", "admin"]
