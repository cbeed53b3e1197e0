# officedesk/services/approval.py
from typing import Any, Mapping, Union

from officedesk.models.common import ApprovalStatus

StatusInput = Union[ApprovalStatus, str]


class InvalidStatusError(ValueError):
    """Valor de pista fuera de {pending, approved, rejected}."""


def coerce_status(value: StatusInput) -> ApprovalStatus:
    if isinstance(value, ApprovalStatus):
        return value
    try:
        return ApprovalStatus(value)
    except ValueError:
        raise InvalidStatusError(f"Estado de aprobación desconocido: {value!r}") from None


def resolve(status_by_staff: StatusInput, status_by_admin: StatusInput) -> ApprovalStatus:
    """
    Estado global a partir de las dos pistas.

    1. Cualquier rechazo gana, aunque la otra pista haya aprobado.
    2. Aprobado solo si ambas aprobaron.
    3. Todo lo demás queda pendiente.
    """
    staff = coerce_status(status_by_staff)
    admin = coerce_status(status_by_admin)

    if ApprovalStatus.REJECTED in (staff, admin):
        return ApprovalStatus.REJECTED
    if staff is ApprovalStatus.APPROVED and admin is ApprovalStatus.APPROVED:
        return ApprovalStatus.APPROVED
    return ApprovalStatus.PENDING


def resolve_request(request: Union[Mapping[str, Any], Any]) -> ApprovalStatus:
    if isinstance(request, Mapping):
        return resolve(request["status_by_staff"], request["status_by_admin"])
    return resolve(request.status_by_staff, request.status_by_admin)
